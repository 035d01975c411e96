from __future__ import annotations

"""Scoring profile definitions and the helpers that load and validate them."""

import math
import re
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Mapping, TypeVar

import yaml

from prospect.errors import ConfigValidationError

WEIGHT_TOTAL = 100.0
WEIGHT_TOLERANCE = 0.01

# YELLOW gates are derived from the GREEN gates, never configured directly.
YELLOW_ADC_MULTIPLIER = 1.5
YELLOW_SCORE_MULTIPLIER = 0.7

_Section = TypeVar("_Section")


def _check_numbers(section: str, values: Mapping[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigValidationError(
                f"{section}.{key} must be a number, got {value!r}"
            )
        if not math.isfinite(value):
            raise ConfigValidationError(f"{section}.{key} must be finite, got {value!r}")
        if value < 0:
            raise ConfigValidationError(
                f"{section}.{key} must not be negative, got {value!r}"
            )


def _check_weight_total(section: str, values: Mapping[str, float]) -> None:
    total = sum(values.values())
    if total == 0:
        raise ConfigValidationError(f"{section} total weight is zero")
    if abs(total - WEIGHT_TOTAL) > WEIGHT_TOLERANCE:
        raise ConfigValidationError(
            f"{section} must sum to {WEIGHT_TOTAL:g}, got {total:.2f}"
        )


def _as_dict(instance: object) -> Dict[str, float]:
    return {item.name: getattr(instance, item.name) for item in fields(instance)}


@dataclass(slots=True, frozen=True)
class TierWeights:
    """Category weights for the tier classifier's weighted score."""

    quality: float = 30.0
    compliance: float = 30.0
    operational: float = 20.0
    market: float = 20.0

    def __post_init__(self) -> None:
        values = _as_dict(self)
        _check_numbers("weights", values)
        _check_weight_total("weights", values)

    @property
    def total(self) -> float:
        return self.quality + self.compliance + self.operational + self.market

    def as_dict(self) -> Dict[str, float]:
        return _as_dict(self)


@dataclass(slots=True, frozen=True)
class RankingWeights:
    """Category weights for the composite ranker."""

    adc: float = 25.0
    quality: float = 20.0
    market: float = 20.0
    financial: float = 15.0
    ownership: float = 10.0
    demographics: float = 10.0

    def __post_init__(self) -> None:
        values = _as_dict(self)
        _check_numbers("ranking_weights", values)
        _check_weight_total("ranking_weights", values)

    @property
    def total(self) -> float:
        return sum(_as_dict(self).values())

    def as_dict(self) -> Dict[str, float]:
        return _as_dict(self)


@dataclass(slots=True, frozen=True)
class YellowThresholds:
    adc_max: float
    min_overall: float


@dataclass(slots=True, frozen=True)
class Thresholds:
    """GREEN gate thresholds."""

    adc_max: float = 60.0
    min_quality: float = 70.0
    min_compliance: float = 70.0
    min_operational: float = 50.0
    min_market: float = 50.0
    min_overall: float = 65.0

    def __post_init__(self) -> None:
        _check_numbers("thresholds", _as_dict(self))

    def yellow(self) -> YellowThresholds:
        """Return the YELLOW gates derived from these thresholds."""

        return YellowThresholds(
            adc_max=self.adc_max * YELLOW_ADC_MULTIPLIER,
            min_overall=self.min_overall * YELLOW_SCORE_MULTIPLIER,
        )

    def minimum_for(self, category: str) -> float:
        return getattr(self, f"min_{category}")

    def as_dict(self) -> Dict[str, float]:
        return _as_dict(self)


@dataclass(slots=True, frozen=True)
class Modifiers:
    """Bonus and penalties applied to the weighted score."""

    con_state_bonus: float = 10.0
    pe_backed_penalty: float = 15.0
    chain_penalty: float = 5.0
    ownership_complexity_penalty: float = 10.0

    def __post_init__(self) -> None:
        _check_numbers("modifiers", _as_dict(self))

    def as_dict(self) -> Dict[str, float]:
        return _as_dict(self)


class MissingDataPolicy(str, Enum):
    """How a gate treats a metric the provider does not report."""

    PASS_THROUGH = "pass_through"
    FAIL_CLOSED = "fail_closed"

    def satisfied(self, value: float | None, predicate: Callable[[float], bool]) -> bool:
        if value is None:
            return self is MissingDataPolicy.PASS_THROUGH
        return predicate(value)


@dataclass(slots=True, frozen=True)
class ScoringConfig:
    """Named, validated bundle of weights, thresholds and modifiers."""

    name: str = "Standard Scoring"
    tier_weights: TierWeights = field(default_factory=TierWeights)
    ranking_weights: RankingWeights = field(default_factory=RankingWeights)
    thresholds: Thresholds = field(default_factory=Thresholds)
    modifiers: Modifiers = field(default_factory=Modifiers)
    missing_data_policy: MissingDataPolicy = MissingDataPolicy.PASS_THROUGH

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigValidationError("Scoring profile name must be a non-empty string")
        expected = (
            ("tier_weights", TierWeights),
            ("ranking_weights", RankingWeights),
            ("thresholds", Thresholds),
            ("modifiers", Modifiers),
            ("missing_data_policy", MissingDataPolicy),
        )
        for attribute, kind in expected:
            if not isinstance(getattr(self, attribute), kind):
                raise ConfigValidationError(
                    f"{attribute} must be a {kind.__name__} instance"
                )

    def yellow_thresholds(self) -> YellowThresholds:
        return self.thresholds.yellow()

    def to_mapping(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "weights": self.tier_weights.as_dict(),
            "ranking_weights": self.ranking_weights.as_dict(),
            "thresholds": self.thresholds.as_dict(),
            "modifiers": self.modifiers.as_dict(),
            "missing_data_policy": self.missing_data_policy.value,
        }


DEFAULT_CONFIG = ScoringConfig()


# ----------------------------------------------------------------------
# Profile loading
# ----------------------------------------------------------------------

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_METADATA_KEYS = {"id", "description", "is_default"}

# Categories that tell a tier weight map from a ranking weight map.
_TIER_ONLY_KEYS = {"compliance", "operational"}
_RANKING_ONLY_KEYS = {"adc", "financial", "ownership", "demographics"}


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key.strip()).lower().replace("-", "_")


def _weight_key(key: str) -> str:
    key = _snake(key)
    return key[: -len("_weight")] if key.endswith("_weight") else key


def _threshold_key(key: str) -> str:
    key = _snake(key)
    if key.startswith("min_") and key.endswith("_score"):
        key = key[: -len("_score")]
    return key


def _modifier_key(key: str) -> str:
    key = _snake(key)
    # Older profiles were saved with this misspelling.
    return "pe_backed_penalty" if key == "pe_baked_penalty" else key


def _coerce_number(section: str, key: str, value: object) -> float:
    if isinstance(value, bool):
        raise ConfigValidationError(f"{section}.{key} must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as exc:
            raise ConfigValidationError(
                f"{section}.{key} must be a number, got {value!r}"
            ) from exc
    raise ConfigValidationError(f"{section}.{key} must be a number, got {value!r}")


def _override(
    base: _Section,
    payload: object,
    section: str,
    normalize: Callable[[str], str],
) -> _Section:
    if payload is None:
        return base
    if not isinstance(payload, Mapping):
        raise ConfigValidationError(f"'{section}' must be a mapping")
    names = {item.name for item in fields(base)}
    updates: Dict[str, float] = {}
    for raw_key, value in payload.items():
        key = normalize(str(raw_key))
        if key not in names:
            raise ConfigValidationError(f"Unknown {section} key '{raw_key}'")
        updates[key] = _coerce_number(section, str(raw_key), value)
    return replace(base, **updates)


def _parse_policy(value: object) -> MissingDataPolicy:
    if isinstance(value, MissingDataPolicy):
        return value
    text = str(value).strip()
    if not text.isupper():
        text = _snake(text)
    try:
        return MissingDataPolicy(text.lower())
    except ValueError as exc:
        allowed = ", ".join(policy.value for policy in MissingDataPolicy)
        raise ConfigValidationError(
            f"Unknown missing_data_policy {value!r}; expected one of {allowed}"
        ) from exc


def _weights_target(payload: object) -> str:
    """Return the section a ``weights`` map belongs to.

    Saved ranking profiles keep their ranking weights under ``weights``;
    the keys decide which calculator they configure.
    """

    if not isinstance(payload, Mapping):
        return "weights"
    keys = {_weight_key(str(key)) for key in payload}
    if keys & _RANKING_ONLY_KEYS:
        if keys & _TIER_ONLY_KEYS:
            raise ConfigValidationError(
                "'weights' mixes tier and ranking categories; "
                "put ranking weights under 'ranking_weights'"
            )
        return "ranking_weights"
    return "weights"


def ranking_weights_from_mapping(
    payload: Mapping[str, object] | None,
    base: RankingWeights | None = None,
) -> RankingWeights:
    """Overlay a ranking weight map on *base* and validate the result."""

    return _override(base or DEFAULT_CONFIG.ranking_weights, payload, "ranking_weights", _weight_key)


def scoring_config_from_mapping(
    payload: Mapping[str, object],
    base: ScoringConfig | None = None,
) -> ScoringConfig:
    """Build a :class:`ScoringConfig` from a profile mapping.

    Keys may be camelCase or snake_case. Sections or keys missing from
    *payload* keep the value from *base*; unknown keys are rejected so a
    typo never silently falls back to a default.
    """

    if not isinstance(payload, Mapping):
        raise ConfigValidationError("Scoring profile must be a mapping")
    base = base or DEFAULT_CONFIG
    sections: Dict[str, object] = {}
    for raw_key, value in payload.items():
        key = _snake(str(raw_key))
        if key in _METADATA_KEYS:
            continue
        if key not in {
            "name",
            "weights",
            "ranking_weights",
            "thresholds",
            "modifiers",
            "missing_data_policy",
        }:
            raise ConfigValidationError(f"Unknown scoring profile key '{raw_key}'")
        sections[key] = value

    if "weights" in sections and _weights_target(sections["weights"]) == "ranking_weights":
        if sections.get("ranking_weights") is not None:
            raise ConfigValidationError(
                "Ranking weights given under both 'weights' and 'ranking_weights'"
            )
        sections["ranking_weights"] = sections.pop("weights")

    policy = base.missing_data_policy
    if sections.get("missing_data_policy") is not None:
        policy = _parse_policy(sections["missing_data_policy"])

    return ScoringConfig(
        name=str(sections.get("name") or base.name),
        tier_weights=_override(base.tier_weights, sections.get("weights"), "weights", _weight_key),
        ranking_weights=ranking_weights_from_mapping(
            sections.get("ranking_weights"), base.ranking_weights
        ),
        thresholds=_override(
            base.thresholds, sections.get("thresholds"), "thresholds", _threshold_key
        ),
        modifiers=_override(base.modifiers, sections.get("modifiers"), "modifiers", _modifier_key),
        missing_data_policy=policy,
    )


def load_scoring_profile(path: Path, base: ScoringConfig | None = None) -> ScoringConfig:
    """Load a YAML or JSON scoring profile from *path*."""

    if not path.exists():
        raise FileNotFoundError(f"Scoring profile not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            payload = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"Scoring profile {path} is not valid YAML/JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ConfigValidationError(f"Scoring profile {path} must contain a mapping")
    if "name" not in payload:
        payload = {**payload, "name": path.stem}
    return scoring_config_from_mapping(payload, base=base)


__all__ = [
    "DEFAULT_CONFIG",
    "MissingDataPolicy",
    "Modifiers",
    "RankingWeights",
    "ScoringConfig",
    "Thresholds",
    "TierWeights",
    "WEIGHT_TOLERANCE",
    "YELLOW_ADC_MULTIPLIER",
    "YELLOW_SCORE_MULTIPLIER",
    "YellowThresholds",
    "load_scoring_profile",
    "ranking_weights_from_mapping",
    "scoring_config_from_mapping",
]
