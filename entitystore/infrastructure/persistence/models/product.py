"""Product ORM model. Table: products."""

from sqlalchemy import Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from entitystore.infrastructure.persistence.database import Base
from entitystore.infrastructure.persistence.models.mixins import EntityModel


class Product(EntityModel, Base):
    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False
    )
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
