"""
Base repository class providing the persistence half of a CRUD resource.

Each repository binds one SQLAlchemy model and one immutable record type. Every
operation runs in its own unit of work opened from an `async_sessionmaker`, so
a failure rolls back and leaves prior state untouched, and callers only ever
receive record snapshots, never ORM instances attached to a session.

Bookkeeping fields (`id`, `created_at`, `updated_at`) belong to the repository:
ids are fresh UUID4 values, timestamps come from a monotonic UTC clock.
"""
from resource_crud.exceptions.base import InvalidFieldError
from resource_crud.exceptions.mapper import storage_error_handler
from resource_crud.validators.model_fields import find_unknown_model_kwargs, get_required_columns
from resource_crud.core.clock import UtcClock, default_clock
from resource_crud.core.locks import KeyedLock

import time
from typing import TypeVar, Generic, Type, Any
from uuid import UUID
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy import select, delete, func
import logging

from resource_crud.database.base import Base

# Type variables for the model class and the record snapshot class
ModelType = TypeVar("ModelType", bound=Base)
RecordType = TypeVar("RecordType", bound=BaseModel)

# Setup logging
logger = logging.getLogger(__name__)

# Fields callers may never set directly
PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at"})

# Shared across repository instances; slots are kept per event loop
_ROW_LOCKS = KeyedLock()


def coerce_id(entity_id: UUID | str) -> UUID | None:
    """Return `entity_id` as a UUID, or None when it cannot name any record."""
    if isinstance(entity_id, UUID):
        return entity_id
    try:
        return UUID(str(entity_id))
    except (ValueError, TypeError, AttributeError):
        return None


class BaseRepository(Generic[ModelType, RecordType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
        RecordType: The frozen pydantic model returned to callers.
    """

    def __init__(
        self,
        model: Type[ModelType],
        record_type: Type[RecordType],
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: UtcClock | None = None,
        row_locks: KeyedLock | None = None,
    ):
        """
        Initialize the repository.

        Args:
            model: The SQLAlchemy model class (not an instance), e.g. Product.
            record_type: Snapshot class built from a model instance via `model_validate`.
            session_factory: Opens one AsyncSession per operation.
            clock: Timestamp source; defaults to the process-wide monotonic clock.
            row_locks: Per-id lock registry; defaults to the process-wide registry.
        """
        self.model = model
        self.record_type = record_type
        self.session_factory = session_factory
        self.clock = clock if clock is not None else default_clock
        self.row_locks = row_locks if row_locks is not None else _ROW_LOCKS

    @property
    def model_name(self) -> str:
        return self.model.__name__

    def _snapshot(self, entity: ModelType) -> RecordType:
        return self.record_type.model_validate(entity)

    def _lock_key(self, entity_id: UUID) -> tuple[str, UUID]:
        return (self.model.__tablename__, entity_id)

    def _check_fields(self, fields: dict[str, Any], operation: str) -> None:
        unknown = find_unknown_model_kwargs(self.model, fields)
        protected = [k for k in fields if k in PROTECTED_FIELDS]
        rejected = sorted(set(unknown) | set(protected))
        if rejected:
            logger.info(
                f"repo.{operation}.invalid_fields",
                extra={"model": self.model_name, "operation": operation, "invalid_fields": rejected},
            )
            raise InvalidFieldError(
                f"Unknown or read-only field(s) for {self.model_name}: {', '.join(rejected)}",
                fields=rejected,
            )

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, **fields: Any) -> RecordType:
        """
        Persist a new entity and return its snapshot.

        Assigns a fresh id and sets created_at == updated_at to the current time.

        Raises:
            InvalidFieldError: unknown/read-only fields, or required columns missing.
            StorageError: the database write failed.
        """
        logger.debug(
            "repo.create.start",
            extra={"model": self.model_name, "operation": "create", "provided_keys": sorted(fields)},
        )
        self._check_fields(fields, "create")

        required_cols = get_required_columns(self.model, exclude=PROTECTED_FIELDS)
        missing = [c for c in required_cols if fields.get(c) is None]
        if missing:
            logger.info(
                "repo.create.missing_required",
                extra={"model": self.model_name, "operation": "create", "missing_fields": sorted(missing)},
            )
            raise InvalidFieldError(
                f"Missing required field(s): {', '.join(missing)} for {self.model_name}", fields=missing
            )

        start = time.perf_counter()
        async with storage_error_handler(self.model_name, "create"):
            async with self.session_factory() as session, session.begin():
                now = self.clock.now()
                entity = self.model(**fields, created_at=now, updated_at=now)
                session.add(entity)
                # flush assigns the primary key default before we snapshot
                await session.flush()
                record = self._snapshot(entity)

        logger.info(
            "repo.create.success",
            extra={
                "model": self.model_name,
                "operation": "create",
                "id": str(record.id),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return record

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def list_all(self) -> list[RecordType]:
        """
        Return every stored record in insertion order.

        The result is a fresh list of snapshots, so iterating it twice or calling
        again against unchanged storage yields the same records.
        """
        async with storage_error_handler(self.model_name, "list"):
            async with self.session_factory() as session:
                result = await session.execute(
                    select(self.model).order_by(self.model.created_at, self.model.id)
                )
                records = [self._snapshot(entity) for entity in result.scalars().all()]

        logger.debug(f"Retrieved {len(records)} {self.model_name} entities")
        return records

    async def get_by_id(self, entity_id: UUID | str) -> RecordType | None:
        """
        Get a record by its ID.

        Returns:
            The record if found, otherwise None. Malformed ids are simply absent.
        """
        uid = coerce_id(entity_id)
        if uid is None:
            logger.debug(f"Ignoring malformed {self.model_name} id: {entity_id!r}")
            return None

        async with storage_error_handler(self.model_name, "retrieve"):
            async with self.session_factory() as session:
                entity = await session.get(self.model, uid)
                record = self._snapshot(entity) if entity is not None else None

        logger.debug(f"Retrieved {self.model_name} by ID: {uid} (found={record is not None})")
        return record

    async def exists(self, entity_id: UUID | str) -> bool:
        """Check whether a record exists without loading it."""
        uid = coerce_id(entity_id)
        if uid is None:
            return False

        async with storage_error_handler(self.model_name, "check"):
            async with self.session_factory() as session:
                result = await session.execute(select(self.model.id).where(self.model.id == uid))
                return result.scalar() is not None

    async def count(self) -> int:
        """Number of stored records."""
        async with storage_error_handler(self.model_name, "count"):
            async with self.session_factory() as session:
                result = await session.execute(select(func.count(self.model.id)))
                count = result.scalar() or 0

        logger.debug(f"Counted {count} {self.model_name} entities")
        return count

    # =================================================================================================================
    # Update
    # =================================================================================================================

    async def update(self, entity_id: UUID | str, **patch: Any) -> RecordType | None:
        """
        Apply `patch` over an existing record and bump its updated_at.

        Updates to the same id are serialized, and updated_at strictly increases
        across successive successful updates. There is no implicit create.

        Returns:
            The new record state, or None if the id does not exist.

        Raises:
            InvalidFieldError: unknown or read-only fields in `patch`.
            StorageError: the database write failed.
        """
        self._check_fields(patch, "update")
        uid = coerce_id(entity_id)
        if uid is None:
            logger.warning(f"{self.model_name} with ID {entity_id!r} not found for update")
            return None

        async with self.row_locks.hold(self._lock_key(uid)):
            async with storage_error_handler(self.model_name, "update"):
                async with self.session_factory() as session, session.begin():
                    entity = await session.get(self.model, uid, with_for_update=True)
                    if entity is None:
                        record = None
                    else:
                        for key, value in patch.items():
                            setattr(entity, key, value)
                        entity.updated_at = self.clock.now(after=entity.updated_at)
                        await session.flush()
                        record = self._snapshot(entity)

        if record is None:
            logger.warning(f"{self.model_name} with ID {uid} not found for update")
            return None

        logger.info(
            "repo.update.success",
            extra={"model": self.model_name, "operation": "update", "id": str(uid), "updated_keys": sorted(patch)},
        )
        return record

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete(self, entity_id: UUID | str) -> bool:
        """
        Delete a record by its ID.

        Returns:
            True if a record existed and was removed, False if it did not exist.
            Deleting a missing id is not an error.
        """
        uid = coerce_id(entity_id)
        if uid is None:
            return False

        async with self.row_locks.hold(self._lock_key(uid)):
            async with storage_error_handler(self.model_name, "delete"):
                async with self.session_factory() as session, session.begin():
                    result = await session.execute(delete(self.model).where(self.model.id == uid))
                    deleted = result.rowcount > 0

        if deleted:
            logger.info(
                "repo.delete.success",
                extra={"model": self.model_name, "operation": "delete", "id": str(uid)},
            )
        else:
            logger.warning(f"{self.model_name} with ID {uid} not found for deletion")
        return deleted
