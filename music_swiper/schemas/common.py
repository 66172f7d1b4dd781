"""Envelopes shared by several endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class ActionResult(BaseModel):
    """Acknowledgement returned by mutating endpoints."""

    success: bool = True
    message: str


__all__ = ["ActionResult"]
