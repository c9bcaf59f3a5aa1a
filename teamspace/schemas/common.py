"""Response envelope shared by every JSON endpoint."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """``{"data": ..., "message": ...}`` wrapper."""

    data: T | None = None
    message: str | None = None
