from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..validators import FieldSchema, required, string, non_empty, max_length

NAME_MAX_LENGTH = 255


class ProductRecord(BaseModel):
    """
    Immutable snapshot of a persisted Product.

    Repositories hand out these instead of ORM objects, so callers can never
    mutate storage through a returned value.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID = Field(..., description="Identifier assigned by the repository")
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    description: str = Field(..., min_length=1)
    created_at: datetime = Field(..., description="Set once on create")
    updated_at: datetime = Field(..., description="Refreshed on every update")


PRODUCT_SCHEMA = FieldSchema(
    {
        "name": [required(), string(), non_empty(), max_length(NAME_MAX_LENGTH)],
        "description": [required(), string(), non_empty()],
    }
)
