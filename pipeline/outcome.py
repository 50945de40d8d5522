"""Explicit stage results: the value plus which rung of the degradation ladder produced it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar


T = TypeVar("T")

# ladder rungs
STRUCTURED = "structured"
SIMPLIFIED = "simplified"
DEFAULT = "default"
MODEL = "model"
ORIGINAL = "original"
FALLBACK = "fallback"
SKIPPED = "skipped"


@dataclass
class StageOutcome(Generic[T]):
    value: T
    level: str
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None

    @classmethod
    def ok(cls, value: T, level: str) -> "StageOutcome[T]":
        return cls(value=value, level=level)

    @classmethod
    def degrade(cls, value: T, level: str, error: object) -> "StageOutcome[T]":
        return cls(value=value, level=level, error=str(error) or type(error).__name__)
