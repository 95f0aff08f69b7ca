"""Request middleware."""

from sharp.middleware.auth import AuthMiddleware

__all__ = ["AuthMiddleware"]
