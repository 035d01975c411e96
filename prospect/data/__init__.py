"""Provider data collaborators: schema, read-only repository and writers."""
from __future__ import annotations

from .repository import ProviderRepository
from .schema import PROVIDER_TABLE, ProviderSchema
from .seed import load_seed_providers
from .storage import ProviderWriter, TierStore

__all__ = [
    "PROVIDER_TABLE",
    "ProviderRepository",
    "ProviderSchema",
    "ProviderWriter",
    "TierStore",
    "load_seed_providers",
]
