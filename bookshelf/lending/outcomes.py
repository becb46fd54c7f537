"""
Typed results of lending operations.

The rules engine and the service return these values instead of raising,
so callers branch on ``outcome.ok`` and translate a Rejection into whatever
their surface needs (an HTTP status, a CLI exit code).
"""

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Union


class ErrorKind(str, enum.Enum):
    INVALID_ACTOR = "invalid_actor"          # wrong party for the action
    FORBIDDEN = "forbidden"                  # right shape, wrong permission
    INVALID_STATE = "invalid_state"          # includes lost compare-and-set races
    CONFLICT = "conflict"                    # one active request per book
    NOT_FOUND = "not_found"
    STORE_UNAVAILABLE = "store_unavailable"  # transient database failure


@dataclass(frozen=True)
class Rejection:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    @property
    def retryable(self) -> bool:
        return self.kind is ErrorKind.STORE_UNAVAILABLE


@dataclass
class Applied:
    """A transition plan that was committed, with the entities it touched."""
    action: str
    request: Optional[object] = None
    book: Optional[object] = None
    notifications: List[object] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True


Outcome = Union[Applied, Rejection]
