"""Domain services."""

from .auth_service import AuthService, OAuthClient
from .base import Service
from .identity_link_service import IdentityLinkService
from .jwt_service import JWTService
from .state_token_service import StateTokenService
from .stats_service import StatsService

__all__ = [
    "AuthService",
    "IdentityLinkService",
    "JWTService",
    "OAuthClient",
    "Service",
    "StateTokenService",
    "StatsService",
]
