from __future__ import annotations

"""Common shape shared by the tier classifier and the composite ranker."""

from typing import Protocol, TypeVar, runtime_checkable

from .models import ProviderScoreInputs

_Result = TypeVar("_Result", covariant=True)


@runtime_checkable
class ScoringStrategy(Protocol[_Result]):
    """Evaluate a single provider under a fixed, already validated profile.

    The classifier answers an admission question (which tier?) and the
    ranker an ordering question (how good?); they share no
    scoring rules.
    """

    name: str

    def evaluate(self, record: ProviderScoreInputs) -> _Result:
        """Return the result for *record* without side effects."""


__all__ = ["ScoringStrategy"]
