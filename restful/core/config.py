"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_PAGE_SIZE = 20
DEFAULT_INVALID_PARAMETER_MESSAGE = "invalid parameter format"
DEFAULT_NOT_FOUND_MESSAGE = "resource not found"
DEFAULT_CONFLICT_MESSAGE = "resource already exists"


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw)


@dataclass(frozen=True)
class RestfulSettings:
    """Runtime settings for resource handlers."""

    default_page_size: int
    invalid_parameter_message: str
    not_found_message: str
    conflict_message: str

    def safe_for_logging(self) -> dict[str, str | int]:
        """Return settings safe for logs."""
        return {
            "default_page_size": self.default_page_size,
            "invalid_parameter_message": self.invalid_parameter_message,
            "not_found_message": self.not_found_message,
            "conflict_message": self.conflict_message,
        }


@lru_cache(maxsize=1)
def get_settings() -> RestfulSettings:
    """Load resource handler settings from the environment."""
    page_size = _get_int_env("RESTFUL_DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    if page_size < 1:
        raise ValueError("RESTFUL_DEFAULT_PAGE_SIZE must be a positive integer")
    return RestfulSettings(
        default_page_size=page_size,
        invalid_parameter_message=os.getenv(
            "RESTFUL_INVALID_PARAMETER_MESSAGE", DEFAULT_INVALID_PARAMETER_MESSAGE
        ),
        not_found_message=os.getenv("RESTFUL_NOT_FOUND_MESSAGE", DEFAULT_NOT_FOUND_MESSAGE),
        conflict_message=os.getenv("RESTFUL_CONFLICT_MESSAGE", DEFAULT_CONFLICT_MESSAGE),
    )
