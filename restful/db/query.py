"""Query options and the model contract consumed by resource handlers."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Protocol
from typing import runtime_checkable


@dataclass
class QueryOptions:
    """Filter, pagination and payload options for one model operation.

    ``index`` fills in ``limit`` and ``offset`` in place.
    """

    where: dict[str, Any] = field(default_factory=dict)
    filters: list[Any] = field(default_factory=list)
    defaults: dict[str, Any] = field(default_factory=dict)
    values: dict[str, Any] = field(default_factory=dict)
    order_by: list[Any] = field(default_factory=list)
    limit: int | None = None
    offset: int | None = None


@runtime_checkable
class ResourceEntity(Protocol):
    """Single loaded resource."""

    async def save(self) -> None: ...

    async def destroy(self) -> None: ...

    def to_json(self) -> Any: ...


@runtime_checkable
class ResourceModel(Protocol):
    """Collection of resources the verb handlers operate on."""

    async def find_or_create(self, options: QueryOptions) -> tuple[ResourceEntity, bool]: ...

    async def find_one(self, where: dict[str, Any]) -> ResourceEntity | None: ...

    async def find_all(self, options: QueryOptions) -> list[ResourceEntity]: ...

    async def count(self, options: QueryOptions) -> int: ...
