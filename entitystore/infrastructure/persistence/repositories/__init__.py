"""SQLAlchemy repositories implementing the application store protocols."""

from entitystore.infrastructure.persistence.repositories.base import BaseRepository
from entitystore.infrastructure.persistence.repositories.product_repo import (
    ProductRepository,
)
from entitystore.infrastructure.persistence.repositories.user_repo import (
    UserRepository,
)

__all__ = ["BaseRepository", "ProductRepository", "UserRepository"]
