"""Pydantic request/response models for the mimecat server API."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Category models
# ---------------------------------------------------------------------------

class CategoryDefinition(BaseModel):
    name: str
    color: str = "white"
    patterns_case_insensitive: list[str] = []
    patterns_case_sensitive: list[str] = []


# ---------------------------------------------------------------------------
# Classification models
# ---------------------------------------------------------------------------

class ClassifyRequest(BaseModel):
    names: list[str]


class ClassifyResult(BaseModel):
    name: str
    category: Optional[str] = None
    color: Optional[str] = None
    pattern: str = ""
    suffix: str = ""
    case_insensitive: bool = False
