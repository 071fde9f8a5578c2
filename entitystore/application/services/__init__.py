"""Application services composed over the cached repositories."""

from entitystore.application.services.auth_service import AuthService
from entitystore.application.services.product_service import ProductService
from entitystore.application.services.user_service import UserService

__all__ = ["AuthService", "ProductService", "UserService"]
