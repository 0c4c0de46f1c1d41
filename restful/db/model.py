"""SQLAlchemy implementation of the resource model contract.

The adapter works on a caller-supplied synchronous ``Session``. Every session
call runs in Starlette's threadpool so awaiting a model operation never
blocks the event loop.
"""

from __future__ import annotations

import logging
from typing import Any
from typing import Generic
from typing import TypeVar

from sqlalchemy import Select
from sqlalchemy import func
from sqlalchemy import inspect
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from restful.db.query import QueryOptions

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class BoundEntity(Generic[ModelT]):
    """A mapped row together with the session it was loaded through.

    Attribute reads and writes go straight to the row.
    """

    __slots__ = ("_session", "_row")

    def __init__(self, session: Session, row: ModelT) -> None:
        object.__setattr__(self, "_session", session)
        object.__setattr__(self, "_row", row)

    @property
    def row(self) -> ModelT:
        return self._row

    def __getattr__(self, name: str) -> Any:
        return getattr(self._row, name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._row, name, value)

    def __repr__(self) -> str:
        return f"BoundEntity({self._row!r})"

    def _commit(self) -> None:
        try:
            self._session.flush()
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        self._session.refresh(self._row)

    def _delete(self) -> None:
        try:
            self._session.delete(self._row)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    async def save(self) -> None:
        """Flush pending attribute changes and commit them."""
        await run_in_threadpool(self._commit)

    async def destroy(self) -> None:
        """Delete the row and commit."""
        await run_in_threadpool(self._delete)

    def to_json(self) -> dict[str, Any]:
        """Return the mapped column values keyed by attribute name."""
        mapper = inspect(self._row).mapper
        return {attr.key: getattr(self._row, attr.key) for attr in mapper.column_attrs}


class SQLAlchemyModel(Generic[ModelT]):
    """Resource collection over one mapped class and a synchronous session."""

    def __init__(self, session: Session, mapped_class: type[ModelT]) -> None:
        self.session = session
        self.mapped_class = mapped_class

    def __repr__(self) -> str:
        return f"SQLAlchemyModel({self.mapped_class.__name__})"

    def _column(self, name: str) -> Any:
        mapper = inspect(self.mapped_class)
        if name not in mapper.column_attrs:
            raise AttributeError(f"{self.mapped_class.__name__} has no column {name!r}")
        return getattr(self.mapped_class, name)

    def _conditions(self, where: dict[str, Any], filters: list[Any] | None = None) -> list[Any]:
        conditions = [self._column(name) == value for name, value in where.items()]
        if filters:
            conditions.extend(filters)
        return conditions

    def _ordering(self, order_by: list[Any]) -> list[Any]:
        clauses = []
        for item in order_by:
            if isinstance(item, str):
                if item.startswith("-"):
                    clauses.append(self._column(item[1:]).desc())
                else:
                    clauses.append(self._column(item).asc())
            else:
                clauses.append(item)
        return clauses

    def _bind(self, row: ModelT) -> BoundEntity[ModelT]:
        return BoundEntity(self.session, row)

    def _select_one(self, where: dict[str, Any]) -> ModelT | None:
        stmt = select(self.mapped_class).where(*self._conditions(where)).limit(1)
        return self.session.scalars(stmt).first()

    def _find_or_create(self, options: QueryOptions) -> tuple[ModelT, bool]:
        row = self._select_one(options.where)
        if row is not None:
            return row, False

        row = self.mapped_class(**{**options.defaults, **options.where})
        self.session.add(row)
        try:
            self.session.flush()
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            existing = self._select_one(options.where)
            if existing is None:
                raise
            logger.debug("Concurrent insert of %s detected; using existing row", self.mapped_class.__name__)
            return existing, False
        self.session.refresh(row)
        return row, True

    def _list_statement(self, options: QueryOptions) -> Select[Any]:
        stmt = select(self.mapped_class).where(*self._conditions(options.where, options.filters))
        if options.order_by:
            stmt = stmt.order_by(*self._ordering(options.order_by))
        if options.limit is not None:
            stmt = stmt.limit(options.limit)
        if options.offset is not None:
            stmt = stmt.offset(options.offset)
        return stmt

    def _find_all(self, options: QueryOptions) -> list[ModelT]:
        return list(self.session.scalars(self._list_statement(options)))

    def _count(self, options: QueryOptions) -> int:
        stmt = (
            select(func.count())
            .select_from(self.mapped_class)
            .where(*self._conditions(options.where, options.filters))
        )
        return int(self.session.scalar(stmt) or 0)

    async def find_one(self, where: dict[str, Any]) -> BoundEntity[ModelT] | None:
        """Fetch the first row matching ``where``."""
        row = await run_in_threadpool(self._select_one, where)
        if row is None:
            return None
        return self._bind(row)

    async def find_or_create(self, options: QueryOptions) -> tuple[BoundEntity[ModelT], bool]:
        """Fetch the row matching ``options.where`` or insert it with ``options.defaults``."""
        row, created = await run_in_threadpool(self._find_or_create, options)
        return self._bind(row), created

    async def find_all(self, options: QueryOptions) -> list[BoundEntity[ModelT]]:
        """List rows matching the filters with ordering and pagination applied."""
        rows = await run_in_threadpool(self._find_all, options)
        return [self._bind(row) for row in rows]

    async def count(self, options: QueryOptions) -> int:
        """Count rows matching the filters; pagination is ignored."""
        return await run_in_threadpool(self._count, options)
