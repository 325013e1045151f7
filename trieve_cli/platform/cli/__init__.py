"""Platform CLI commands: login, profiles, organizations, datasets and API keys."""

from .apikey import ApiKeyCommand
from .dataset import DatasetCommand
from .login import LoginCommand
from .organization import OrganizationCommand
from .profile import ProfileCommand

__all__ = [
    "ApiKeyCommand",
    "DatasetCommand",
    "LoginCommand",
    "OrganizationCommand",
    "ProfileCommand",
]
