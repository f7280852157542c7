"""Data Transfer Objects for EC2 instances observed by a server monitor.

This module provides the DTOs used by the AWS EC2 API client to represent
the instance being monitored and the outcome of a termination request.
"""

from dataclasses import dataclass

from integration.enums import Ec2InstanceStateCode


@dataclass
class Ec2InstanceDto:
    """DTO representing an EC2 instance launched to build or serve an OTP graph.

    The instance is created outside of the monitor; the monitor only reads it and
    may request its termination.

    Attributes:
        instance_id: AWS EC2 instance ID (e.g., 'i-1234567890abcdef0')
        public_ip: Public IP address assigned to the instance (if any)
        state_code: Current EC2 state code (0 pending, 16 running, 48 terminated, ...)
        state_name: Current EC2 state name (pending, running, stopping, stopped, etc.)
    """

    instance_id: str
    public_ip: str | None = None
    state_code: int = Ec2InstanceStateCode.PENDING
    state_name: str = "pending"

    @property
    def base_url(self) -> str:
        """Base URL of the instance's public HTTP endpoint."""
        return f"http://{self.public_ip}"

    @classmethod
    def from_api_response(cls, data: dict) -> "Ec2InstanceDto":
        """Parse an entry of `Reservations[].Instances[]` from describe_instances.

        Args:
            data: Raw instance dictionary returned by boto3

        Returns:
            Ec2InstanceDto instance
        """
        state = data.get("State", {})
        return cls(
            instance_id=data["InstanceId"],
            public_ip=data.get("PublicIpAddress"),
            state_code=state.get("Code", Ec2InstanceStateCode.PENDING),
            state_name=state.get("Name", "pending"),
        )


@dataclass
class Ec2InstanceState:
    """Lifecycle state of an EC2 instance as reported by the control plane."""

    code: int

    name: str

    @property
    def is_terminal(self) -> bool:
        return Ec2InstanceStateCode.is_terminal(self.code)


@dataclass
class Ec2InstanceStateChange:
    """Result of a terminate-instances request for a single instance."""

    instance_id: str

    previous_state: Ec2InstanceState

    current_state: Ec2InstanceState

    @property
    def is_terminated(self) -> bool:
        return (self.current_state.code & 0xFF) == Ec2InstanceStateCode.TERMINATED


@dataclass
class TargetHealthDescriptor:
    """A single (target id, health) pair from describe_target_health."""

    target_id: str

    state: str

    port: int | None = None

    reason: str | None = None
