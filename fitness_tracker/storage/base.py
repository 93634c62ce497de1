"""Persistence contract consumed by the activity and goal services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from ..domain.activity import Activity
from ..domain.goal import Goal
from ..results import Err, Ok, Result

T = TypeVar("T")


class StorageErrorKind(str, Enum):
    read = "read"
    write = "write"
    delete = "delete"
    serialization = "serialization"


@dataclass(frozen=True, slots=True)
class StorageError:
    """Failure reported by a storage adapter."""

    kind: StorageErrorKind
    message: str
    cause: BaseException | None = None


StorageResult = Result[T, StorageError]


def stored() -> Ok[None]:
    """Successful result for operations that produce no data."""
    return Ok(None)


def storage_error(
    kind: StorageErrorKind, message: str, cause: BaseException | None = None
) -> Err[StorageError]:
    return Err(StorageError(kind, message, cause))


class Storage(ABC):
    """Asynchronous persistence for activities and goals.

    Every operation reports failure through its result instead of raising.
    ``save_*`` and ``update_*`` both overwrite the whole stored record, and a
    ``load_*`` for an unknown identifier fails with kind ``read``. Nothing is
    transactional across calls.
    """

    @abstractmethod
    async def save_activity(self, activity: Activity) -> StorageResult[None]: ...

    @abstractmethod
    async def load_activity(self, activity_id: str) -> StorageResult[Activity]: ...

    @abstractmethod
    async def load_all_activities(self) -> StorageResult[list[Activity]]: ...

    @abstractmethod
    async def update_activity(self, activity: Activity) -> StorageResult[None]: ...

    @abstractmethod
    async def delete_activity(self, activity_id: str) -> StorageResult[None]: ...

    @abstractmethod
    async def save_goal(self, goal: Goal) -> StorageResult[None]: ...

    @abstractmethod
    async def load_goal(self, goal_id: str) -> StorageResult[Goal]: ...

    @abstractmethod
    async def load_all_goals(self) -> StorageResult[list[Goal]]: ...

    @abstractmethod
    async def update_goal(self, goal: Goal) -> StorageResult[None]: ...

    @abstractmethod
    async def delete_goal(self, goal_id: str) -> StorageResult[None]: ...

    async def aclose(self) -> None:
        """Release backend resources. Adapters without any keep this no-op."""
