from sqlalchemy import String, Text, UUID
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from resource_crud.database.base import Base
from resource_crud.database.types import UTCDateTime
import uuid


class Product(Base):
    """
    SQLAlchemy model for a Product.

    `id`, `created_at` and `updated_at` are owned by the repository: they are
    assigned on insert/update and never accepted from callers.
    """
    __tablename__ = "products"

    # Primary key: UUID (generated using uuid4), indexed for faster lookup
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        index=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id!r}, name={self.name!r})>"
