"""
Authentication module - Pluggable auth providers (JWT).
"""

from common.auth.base import AuthProvider
from common.auth.jwt_auth import JWTAuth
from common.auth.dependencies import create_auth_dependency, extract_token

__all__ = ["AuthProvider", "JWTAuth", "create_auth_dependency", "extract_token"]
