"""Value objects produced while monitoring a server."""

from dataclasses import dataclass

from domain.enums import InstanceHealthStatus, PollStatus


@dataclass(frozen=True)
class InstanceHealth:
    """Result of one instance health probe."""

    status: InstanceHealthStatus
    state_name: str | None = None
    state_code: int | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status == InstanceHealthStatus.TERMINAL

    @classmethod
    def healthy(cls, state_name: str, state_code: int) -> "InstanceHealth":
        return cls(InstanceHealthStatus.HEALTHY, state_name, state_code)

    @classmethod
    def unknown(cls) -> "InstanceHealth":
        return cls(InstanceHealthStatus.UNKNOWN)

    @classmethod
    def terminal(cls, state_name: str, state_code: int | None = None) -> "InstanceHealth":
        return cls(InstanceHealthStatus.TERMINAL, state_name, state_code)


@dataclass(frozen=True)
class PollOutcome:
    """Result of a bounded poll loop.

    `reason` is set when the loop was aborted: the terminal instance state name,
    or "cancelled".
    """

    status: PollStatus
    attempts: int = 0
    elapsed_seconds: float = 0.0
    reason: str | None = None
    cancelled: bool = False

    @property
    def is_completed(self) -> bool:
        return self.status == PollStatus.COMPLETED

    @property
    def is_timed_out(self) -> bool:
        return self.status == PollStatus.TIMED_OUT

    @property
    def is_aborted(self) -> bool:
        return self.status == PollStatus.ABORTED
