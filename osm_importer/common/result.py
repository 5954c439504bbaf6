"""Success/failure values for fallible document operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from osm_importer.common.errors import DocumentError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: T | None = None
    error: DocumentError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DocumentError) -> "Outcome[T]":
        return cls(error=error)


def attempt(func: Callable[..., T], *args, **kwargs) -> Outcome[T]:
    """Call ``func`` and fold a model rejection into a failed outcome.

    Only ``DocumentError`` is captured; anything else is a programming error
    and propagates.
    """
    try:
        return Outcome.success(func(*args, **kwargs))
    except DocumentError as exc:
        return Outcome.failure(exc)
