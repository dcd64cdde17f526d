"""
Environments Module - External identity providers.

environments/
├── base.py      # Provider contract, token/profile dataclasses, exceptions
└── google/      # Google OAuth (Drive connect)
"""

from app.environments.base import (
    EnvironmentProvider,
    EnvironmentError,
    AuthenticationError,
    OAuthTokens,
    UserInfo,
)

__all__ = [
    "EnvironmentProvider",
    "EnvironmentError",
    "AuthenticationError",
    "OAuthTokens",
    "UserInfo",
]
