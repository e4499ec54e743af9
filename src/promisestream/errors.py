"""Structured failures for source resolution and sub-stream draining.

Unsupported values are never errors (they resolve to empty content). Real
failures, a factory raising or an awaitable settling with an exception or a
sub-stream raising mid-iteration, surface to the consumer of the output
stream as a SourceError chained to the original exception.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field


class FailurePhase(StrEnum):
    """Where in the pipeline a source failed."""
    RESOLVE = "resolve"  # factory call or awaitable settlement
    DRAIN = "drain"      # iterating a sub-stream


class SourceFailure(BaseModel):
    """Structured description of a failed source.

    Attributes:
        index: Position of the source in the snapshot
        kind: Classified kind of the queued item (text, stream, deferred, factory)
        phase: Resolution or drain
        message: Human-readable error message
        error_type: Class name of the original exception
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "title": "Source Failure",
            "examples": [{
                "index": 3,
                "kind": "deferred",
                "phase": "resolve",
                "message": "upstream timed out",
                "error_type": "TimeoutError",
            }],
        },
    )

    index: Annotated[int, Field(ge=0, description="Position of the source in the snapshot")]
    kind: str = Field(description="Classified kind of the queued item")
    phase: FailurePhase = Field(default=FailurePhase.RESOLVE)
    message: str = Field(default="", description="Error message of the original exception")
    error_type: str = Field(default="Exception")

    @computed_field
    @property
    def is_drain_failure(self) -> bool:
        """Whether the source had already started emitting chunks."""
        return self.phase is FailurePhase.DRAIN

    @classmethod
    def from_exception(cls, index: int, kind: str, exc: BaseException, phase: FailurePhase = FailurePhase.RESOLVE) -> Self:
        """Describe an exception raised by the source at ``index``."""
        return cls(index=index, kind=kind, phase=phase, message=str(exc), error_type=type(exc).__name__)

    def render(self) -> str:
        verb = "resolving" if self.phase is FailurePhase.RESOLVE else "draining"
        detail = f": {self.message}" if self.message else ""
        return f"Source #{self.index} ({self.kind}) failed while {verb} [{self.error_type}]{detail}"

    __str__ = render


class SourceError(Exception):
    """Exception wrapping a SourceFailure for raising.

    Always raised ``from`` the original exception, so ``__cause__`` holds it.
    """

    __slots__ = ("failure",)

    def __init__(self, failure: SourceFailure) -> None:
        self.failure = failure
        super().__init__(failure.render())

    @property
    def index(self) -> int:
        return self.failure.index

    @property
    def phase(self) -> FailurePhase:
        return self.failure.phase

    @classmethod
    def from_exc(cls, index: int, kind: str, exc: BaseException, phase: FailurePhase = FailurePhase.RESOLVE) -> Self:
        """Fast path: wrap an exception raised by the source at ``index``."""
        return cls(SourceFailure.from_exception(index, kind, exc, phase))
