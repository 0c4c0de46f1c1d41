"""REST resource helpers for FastAPI and SQLAlchemy."""

from restful.core.errors import HttpError
from restful.core.errors import create_http_error
from restful.core.errors import is_http_error
from restful.db.query import QueryOptions
from restful.params import MISSING
from restful.params import FieldOptions
from restful.params import Predicate
from restful.params import PredicateWithArg
from restful.params import Transform
from restful.params import TransformWithArgs
from restful.params import resolve_field
from restful.params import resolve_fields
from restful.plugin import get_restful
from restful.plugin import setup_restful
from restful.tools import RequestContext
from restful.tools import Restful

__all__ = [
    "MISSING",
    "FieldOptions",
    "HttpError",
    "Predicate",
    "PredicateWithArg",
    "QueryOptions",
    "RequestContext",
    "Restful",
    "Transform",
    "TransformWithArgs",
    "create_http_error",
    "get_restful",
    "is_http_error",
    "resolve_field",
    "resolve_fields",
    "setup_restful",
]
