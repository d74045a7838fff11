"""
Resource service: composes the validator and a repository into the five CRUD
operations a transport adapter calls.

Outcomes are typed. Successful calls return records (or True for delete);
failures raise ValidationError, NotFoundError or StorageError, and none of them
leaves storage partially modified.

Updates are full replacements: every declared field is validated on update
exactly as on create, so callers resend the whole entity to change one field.
"""
import logging
from typing import Any, Generic, Mapping
from uuid import UUID

from resource_crud.exceptions.base import NotFoundError
from resource_crud.repositories.base_repository import BaseRepository, RecordType
from resource_crud.validators.validator import FieldSchema, validate

logger = logging.getLogger(__name__)


class ResourceService(Generic[RecordType]):

    def __init__(self, repository: BaseRepository[Any, RecordType], schema: FieldSchema, resource_name: str):
        self.repository = repository
        self.schema = schema
        self.resource_name = resource_name

    def _not_found(self, entity_id: UUID | str, operation: str) -> NotFoundError:
        logger.info(
            f"service.{operation}.not_found",
            extra={"resource": self.resource_name, "operation": operation, "id": str(entity_id)},
        )
        return NotFoundError(f"{self.resource_name} with ID {entity_id} not found", fields=["id"])

    def _validated(self, data: Mapping[str, Any] | Any, operation: str) -> dict[str, Any]:
        result = validate(data, self.schema)
        if not result.ok:
            logger.info(
                f"service.{operation}.invalid",
                extra={
                    "resource": self.resource_name,
                    "operation": operation,
                    "invalid_fields": sorted(result.errors),
                },
            )
        return result.unwrap()

    async def list(self) -> list[RecordType]:
        return await self.repository.list_all()

    async def get(self, entity_id: UUID | str) -> RecordType:
        record = await self.repository.get_by_id(entity_id)
        if record is None:
            raise self._not_found(entity_id, "get")
        return record

    async def create(self, data: Mapping[str, Any] | Any) -> RecordType:
        """Validate `data` and persist it as a new record."""
        values = self._validated(data, "create")
        return await self.repository.create(**values)

    async def update(self, entity_id: UUID | str, data: Mapping[str, Any] | Any) -> RecordType:
        """
        Replace the declared fields of an existing record.

        The existence check runs first, so a missing id is reported as NotFoundError
        even when `data` is also invalid.
        """
        if await self.repository.get_by_id(entity_id) is None:
            raise self._not_found(entity_id, "update")

        values = self._validated(data, "update")

        record = await self.repository.update(entity_id, **values)
        if record is None:
            # deleted between the existence check and the write
            raise self._not_found(entity_id, "update")
        return record

    async def delete(self, entity_id: UUID | str) -> bool:
        if not await self.repository.delete(entity_id):
            raise self._not_found(entity_id, "delete")
        return True
