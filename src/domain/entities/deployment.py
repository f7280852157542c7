"""Deployment descriptors consumed by server monitors.

These records are owned by the deployment layer and are immutable for the duration
of a monitor run.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Ec2Info:
    """EC2 configuration of an OTP server."""

    target_group_arn: str | None = None
    instance_type: str | None = None
    ami_id: str | None = None
    build_instance_type: str | None = None
    build_ami_id: str | None = None

    def has_separate_graph_build_config(self) -> bool:
        """Whether graph building runs on a different instance type/image than serving."""
        return bool(self.build_instance_type or self.build_ami_id)


@dataclass(frozen=True)
class OtpServer:
    """Server definition that deployments are deployed to."""

    id: str
    name: str
    role_arn: str | None = None
    ec2_info: Ec2Info | None = None

    @property
    def target_group_arn(self) -> str | None:
        return self.ec2_info.target_group_arn if self.ec2_info else None


@dataclass(frozen=True)
class Deployment:
    """A deployment of one or more feed versions to an OTP server."""

    id: str
    name: str
    build_graph_only: bool = False
    feed_version_ids: tuple[str, ...] = field(default_factory=tuple)
