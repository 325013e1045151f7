"""Trieve CLI credentials: profile store and configuration resolution."""

from .config import DEFAULT_API_URL, ENV_NO_PROFILE, is_no_profile_mode
from .profiles import (
    Profile,
    ProfileNotFoundError,
    ProfileStore,
    ProfileStoreError,
    edit_store,
    load_store,
    save_store,
)
from .resolver import (
    ConfigurationError,
    CredentialFlags,
    EffectiveConfiguration,
    MissingCredentialError,
    resolve_configuration,
)

__all__ = [
    # Config
    "DEFAULT_API_URL",
    "ENV_NO_PROFILE",
    "is_no_profile_mode",
    # Profiles
    "Profile",
    "ProfileNotFoundError",
    "ProfileStore",
    "ProfileStoreError",
    "edit_store",
    "load_store",
    "save_store",
    # Resolver
    "ConfigurationError",
    "CredentialFlags",
    "EffectiveConfiguration",
    "MissingCredentialError",
    "resolve_configuration",
]
