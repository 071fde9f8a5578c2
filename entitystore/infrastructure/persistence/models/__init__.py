"""ORM models. Importing this package registers every table on Base.metadata."""

from entitystore.infrastructure.persistence.models.product import Product
from entitystore.infrastructure.persistence.models.user import User

__all__ = ["Product", "User"]
