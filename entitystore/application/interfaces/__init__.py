"""Application ports (Protocols) implemented by infrastructure."""

from entitystore.application.interfaces.repositories import (
    IEntityStore,
    IProductRepository,
    IUserRepository,
)

__all__ = ["IEntityStore", "IProductRepository", "IUserRepository"]
