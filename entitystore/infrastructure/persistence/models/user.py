"""User ORM model. Table: users. Email is unique."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from entitystore.infrastructure.persistence.database import Base
from entitystore.infrastructure.persistence.models.mixins import EntityModel


class User(EntityModel, Base):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True, index=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
