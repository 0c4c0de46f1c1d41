"""Per-request helpers: parameter access, responses and generic REST verbs."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
import inspect
import logging
from typing import Any
from typing import Union

from fastapi import Response
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from restful.core.config import get_settings
from restful.db.query import QueryOptions
from restful.db.query import ResourceEntity
from restful.db.query import ResourceModel
from restful.params import MISSING
from restful.params import FieldOptions
from restful.params import FieldSpec
from restful.params import Predicate
from restful.params import PredicateWithArg
from restful.params import Transform
from restful.params import is_absent
from restful.params import resolve_field
from restful.params import resolve_fields
from restful.validators import is_boolean
from restful.validators import is_int
from restful.validators import to_boolean
from restful.validators import to_int

logger = logging.getLogger(__name__)

RenderFn = Callable[[Any], Union[Any, Awaitable[Any]]]
AppendFn = Callable[[Any], Any]

_FLAG = FieldOptions(default=True, validator=Predicate(is_boolean), coerce=Transform(to_boolean))
_POSITIVE_INT = FieldOptions(validator=PredicateWithArg(is_int, {"min": 1}), coerce=Transform(to_int))

INDEX_QUERY_FIELDS: dict[str, FieldOptions] = {
    "with_data": _FLAG,
    "with_total": _FLAG,
    "limit": _POSITIVE_INT,
    "page": _POSITIVE_INT,
    "offset": _POSITIVE_INT,
}


@dataclass
class RequestContext:
    """Incoming parameter sources of one request."""

    params: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)


class Restful:
    """Request-scoped toolbox handed to route handlers."""

    def __init__(self, context: RequestContext) -> None:
        self.context = context
        self.status_code: int = status.HTTP_200_OK
        self.body: Any = None

    # Parameters

    def get_param(self, name: str, options: FieldSpec = None) -> Any:
        return resolve_field(self.context.params.get(name, MISSING), options)

    def get_params(self, fields: Mapping[str, FieldSpec]) -> dict[str, Any]:
        return resolve_fields(self.context.params, fields)

    def get_query(self, name: str, options: FieldSpec = None) -> Any:
        return resolve_field(self.context.query.get(name, MISSING), options)

    def get_queries(self, fields: Mapping[str, FieldSpec]) -> dict[str, Any]:
        return resolve_fields(self.context.query, fields)

    def get_body(self, name: str, options: FieldSpec = None) -> Any:
        return resolve_field(self.context.body.get(name, MISSING), options)

    def get_bodies(self, fields: Mapping[str, FieldSpec]) -> dict[str, Any]:
        return resolve_fields(self.context.body, fields)

    # Responses

    def respond(self, body: Any, status_code: int = status.HTTP_200_OK) -> None:
        self.status_code = status_code
        self.body = body

    def error(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> None:
        self.respond({"msg": message}, status_code)

    def to_response(self) -> Response:
        """Render the stored status and body as a FastAPI response."""
        if self.body is None:
            return Response(status_code=self.status_code)
        return JSONResponse(status_code=self.status_code, content=jsonable_encoder(self.body))

    async def render(self, entity: ResourceEntity, render_fn: RenderFn | None = None) -> Any:
        """Turn an entity into response data with ``render_fn`` or its own ``to_json``."""
        if callable(render_fn):
            data = render_fn(entity)
            if inspect.isawaitable(data):
                data = await data
            return data
        return entity.to_json()

    # Verbs

    async def create(
        self,
        model: ResourceModel,
        options: QueryOptions,
        render_fn: RenderFn | None = None,
    ) -> None:
        """Create a resource unless one matching ``options.where`` exists."""
        entity, created = await model.find_or_create(options)
        if not created:
            logger.info("Refusing to create %r: resource already exists", model)
            self.error(get_settings().conflict_message, status.HTTP_409_CONFLICT)
            return
        data = await self.render(entity, render_fn)
        self.respond(data, status.HTTP_201_CREATED)

    async def update(self, model: ResourceModel, options: QueryOptions) -> None:
        """Assign ``options.values`` onto the resource matching ``options.where``."""
        entity = await model.find_one(options.where)
        if entity is None:
            self._not_found(model, options.where)
            return

        for key, value in options.values.items():
            if is_absent(value):
                continue
            setattr(entity, key, value)

        await entity.save()
        self.respond(None, status.HTTP_204_NO_CONTENT)

    async def destroy(self, model: ResourceModel, where: dict[str, Any]) -> None:
        entity = await model.find_one(where)
        if entity is None:
            self._not_found(model, where)
            return
        await entity.destroy()
        self.respond(None, status.HTTP_204_NO_CONTENT)

    async def show(
        self,
        model: ResourceModel,
        where: dict[str, Any],
        render_fn: RenderFn | None = None,
        append: AppendFn | None = None,
    ) -> None:
        entity = await model.find_one(where)
        if entity is None:
            self._not_found(model, where)
            return
        data = await self.render(entity, render_fn)
        if append:
            data = append(data)
        self.respond(data, status.HTTP_200_OK)

    async def index(
        self,
        model: ResourceModel,
        options: QueryOptions | None = None,
        render_fn: RenderFn | None = None,
        append: AppendFn | None = None,
    ) -> None:
        """List resources with ``limit``/``page``/``offset`` pagination from the query string.

        ``with_data=false`` skips the listing query and ``with_total=false``
        skips the count query. When both ``page`` and ``offset`` are given the
        page wins.
        """
        if options is None:
            options = QueryOptions()
        controls = self.get_queries(INDEX_QUERY_FIELDS)
        limit = controls["limit"]
        page = controls["page"]
        offset = controls["offset"]

        if page or offset:
            options.limit = limit if limit else get_settings().default_page_size
            options.offset = (page - 1) * options.limit if page else offset
        elif limit:
            options.limit = limit

        data = []
        if controls["with_data"]:
            entities = await model.find_all(options)
            for entity in entities:
                data.append(await self.render(entity, render_fn))

        total = await model.count(options) if controls["with_total"] else MISSING
        logger.debug("Listed %d item(s) of %r with limit=%s offset=%s", len(data), model, options.limit, options.offset)

        meta = {
            "limit": options.limit,
            "page": page,
            "offset": options.offset,
            "total": total,
        }
        # unset entries are left out of the body
        result: Any = {
            "data": data,
            "meta": {key: value for key, value in meta.items() if value is not None and not is_absent(value)},
        }
        if append:
            result = append(result)
        self.respond(result, status.HTTP_200_OK)

    def _not_found(self, model: ResourceModel, where: dict[str, Any]) -> None:
        logger.info("No %r matches %s", model, where)
        self.error(get_settings().not_found_message, status.HTTP_404_NOT_FOUND)
