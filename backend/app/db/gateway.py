"""
Document store gateway.

Gives route handlers and services a small, collection-oriented query
contract (find / find_one / insert_one / update_one / delete_one /
aggregate_counts) on top of the SQLAlchemy session.

Filters are plain dicts. A key is a field name, optionally followed by a
lookup:

    {"created_by": "a@x.com"}                         equality
    {"delivery_status__in": [...]}                    membership
    {"role__ne": UserRole.RIDER}                      inequality
    {"email__icontains": "ali"}                       case-insensitive substring

Ordering is a list of field names; prefix with "-" for descending.
"""

import logging
from functools import wraps
from typing import Any, Dict, List, Optional, Sequence

from fastapi import Depends
from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import DuplicateKey, UpstreamFailure
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.models.parcel import Parcel
from backend.app.models.rider import Rider
from backend.app.models.payment import Payment
from backend.app.models.tracking_event import TrackingEvent

logger = logging.getLogger("parcel_delivery.store")

LOOKUPS = ("in", "ne", "icontains")


def translate_store_errors(method):
    """Roll back and re-raise driver errors as UpstreamFailure."""
    @wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error("Document store error on %s.%s: %s", self.name, method.__name__, e)
            await self.session.rollback()
            raise UpstreamFailure("Document store operation failed", service="document_store") from e
    return wrapper


class Collection:
    """One collection (table) of the document store."""

    def __init__(self, session: AsyncSession, model, name: str):
        self.session = session
        self.model = model
        self.name = name

    def _column(self, field: str):
        column = getattr(self.model, field, None)
        if column is None:
            raise ValueError(f"Unknown field '{field}' for collection '{self.name}'")
        return column

    def _criteria(self, filters: Optional[Dict[str, Any]]) -> list:
        criteria = []
        for key, value in (filters or {}).items():
            field, _, lookup = key.partition("__")
            column = self._column(field)
            if not lookup:
                criteria.append(column.is_(None) if value is None else column == value)
            elif lookup == "in":
                criteria.append(column.in_(list(value)))
            elif lookup == "ne":
                criteria.append(column.is_not(None) if value is None else column.is_distinct_from(value))
            elif lookup == "icontains":
                criteria.append(column.ilike(f"%{value}%"))
            else:
                raise ValueError(f"Unsupported lookup '{lookup}', expected one of {LOOKUPS}")
        return criteria

    def _ordering(self, order_by: Optional[Sequence[str]]) -> list:
        ordering = []
        for field in order_by or ():
            if field.startswith("-"):
                ordering.append(self._column(field[1:]).desc())
            else:
                ordering.append(self._column(field).asc())
        return ordering

    @translate_store_errors
    async def find(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence[str]] = None,
        limit: Optional[int] = None
    ) -> List[Any]:
        query = (
            select(self.model)
            .where(*self._criteria(filters))
            .order_by(*self._ordering(order_by))
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    @translate_store_errors
    async def find_one(self, filters: Dict[str, Any]) -> Optional[Any]:
        query = (
            select(self.model)
            .where(*self._criteria(filters))
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    @translate_store_errors
    async def insert_one(self, document: Dict[str, Any]) -> Any:
        """
        Insert one document.

        Raises:
            DuplicateKey: if a unique field (tracking_id, email) is already taken
        """
        record = self.model(**document)
        self.session.add(record)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            fields = [
                column.name for column in self.model.__table__.columns
                if column.unique and document.get(column.name) is not None
            ]
            logger.warning("Duplicate %s document rejected on %s", self.name, fields)
            raise DuplicateKey(self.name, fields) from e
        await self.session.refresh(record)
        return record

    @translate_store_errors
    async def update_one(self, filters: Dict[str, Any], patch: Dict[str, Any]) -> int:
        """
        Apply patch to the first document matching filters.

        Returns the modified count (0 or 1). A document whose fields already
        hold the patched values is not modified and yields 0.
        """
        if not patch:
            return 0
        changed = or_(*[self._column(field).is_distinct_from(value) for field, value in patch.items()])
        target = (
            select(self.model.id)
            .where(*self._criteria(filters), changed)
            .limit(1)
            .correlate(None)
            .scalar_subquery()
        )

        # changed is repeated on the outer statement so the row is re-checked
        # under the update's row lock
        result = await self.session.execute(
            update(self.model)
            .where(self.model.id == target, changed)
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount

    @translate_store_errors
    async def delete_one(self, filters: Dict[str, Any]) -> int:
        result = await self.session.execute(
            select(self.model.id).where(*self._criteria(filters)).limit(1)
        )
        document_id = result.scalar_one_or_none()
        if document_id is None:
            return 0

        await self.session.execute(delete(self.model).where(self.model.id == document_id))
        await self.session.commit()
        return 1

    @translate_store_errors
    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        result = await self.session.execute(
            select(func.count(self.model.id)).where(*self._criteria(filters))
        )
        return result.scalar() or 0

    @translate_store_errors
    async def aggregate_counts(self, field: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Group documents by field and count each group."""
        column = self._column(field)
        result = await self.session.execute(
            select(column, func.count(self.model.id))
            .where(*self._criteria(filters))
            .group_by(column)
            .order_by(column)
        )
        return [{field: value, "count": count} for value, count in result.all()]


class DocumentStore:
    """The five collections of the marketplace, bound to one session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = Collection(session, User, "users")
        self.parcels = Collection(session, Parcel, "parcels")
        self.riders = Collection(session, Rider, "riders")
        self.payments = Collection(session, Payment, "payments")
        self.trackings = Collection(session, TrackingEvent, "trackings")


async def get_store(db: AsyncSession = Depends(get_db)) -> DocumentStore:
    """FastAPI dependency returning the document store for this request."""
    return DocumentStore(db)
