"""Error body schema shared across resource handlers."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorMessage(BaseModel):
    """Body of every client-facing error response."""

    msg: str
