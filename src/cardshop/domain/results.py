"""Tagged results returned by pure transitions and by command dispatch."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Tuple, TypeVar, Union

from cardshop.core.types import ReasonCode
from cardshop.domain.events import SimEvent

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    value: T
    events: Tuple[SimEvent, ...] = ()
    ok: bool = True


@dataclass(frozen=True, slots=True)
class Failure:
    reason: ReasonCode
    ok: bool = False


Outcome = Union[Success[T], Failure]


@dataclass(frozen=True, slots=True)
class CommandResult:
    """What ``dispatch`` hands back: either events or a rejection reason."""

    ok: bool
    events: Tuple[SimEvent, ...] = ()
    reason: ReasonCode | None = None

    @classmethod
    def accepted(cls, events: Tuple[SimEvent, ...] = ()) -> "CommandResult":
        return cls(ok=True, events=events)

    @classmethod
    def rejected(cls, reason: ReasonCode) -> "CommandResult":
        return cls(ok=False, reason=reason)
