from enum import Enum


class MonitorPhase(str, Enum):
    """States of the server monitor, in the order they are traversed.

    Phases only move forward. FAILED may be entered from any non-final phase.
    """

    CREATED = "created"  # Monitor built, prerequisites not yet checked
    AWAITING_STATUS_FILE = "awaiting_status_file"  # Waiting for otp-runner to publish its status file
    AWAITING_RUNNER_COMPLETION = "awaiting_runner_completion"  # Graph build/download in progress
    AWAITING_ROUTER = "awaiting_router"  # Graph loading, router not yet answering
    REGISTERING_WITH_LOAD_BALANCER = "registering_with_load_balancer"
    SUCCEEDED = "succeeded"  # Terminal: graph built (build-only) or server in the target group
    FAILED = "failed"  # Terminal: timeout, instance health, runner error or missing prerequisite

    @property
    def is_final(self) -> bool:
        return self in (MonitorPhase.SUCCEEDED, MonitorPhase.FAILED)

    @property
    def ordinal(self) -> int:
        return list(MonitorPhase).index(self)


class PollStatus(str, Enum):
    """Outcome of a bounded poll loop."""

    COMPLETED = "completed"  # The polled action reported success
    TIMED_OUT = "timed_out"  # The deadline elapsed first
    ABORTED = "aborted"  # Instance reached a terminal state, or the monitor was cancelled


class InstanceHealthStatus(str, Enum):
    """Classification of an EC2 instance's lifecycle state."""

    HEALTHY = "healthy"  # pending or running
    UNKNOWN = "unknown"  # Instance absent from describe_instances (read-after-write lag)
    TERMINAL = "terminal"  # stopping, stopped, shutting-down or terminated


class MonitorFailureReason(str, Enum):
    """Why a monitor failed, used for logs and metric attributes."""

    MISSING_TARGET_GROUP = "missing_target_group"
    TIMEOUT = "timeout"
    INSTANCE_HEALTH = "instance_health"
    RUNNER_ERROR = "runner_error"
    CANCELLED = "cancelled"
    CONTROL_PLANE_ERROR = "control_plane_error"
    UNEXPECTED_ERROR = "unexpected_error"
