"""Explicit success/failure values returned by every fallible operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying the produced value."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying a structured error."""

    error: E


Result = Union[Ok[T], Err[E]]

__all__ = ["Ok", "Err", "Result"]
