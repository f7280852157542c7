from .ec2_instance_dto import (
    Ec2InstanceDto,
    Ec2InstanceState,
    Ec2InstanceStateChange,
    TargetHealthDescriptor,
)

__all__ = [
    "Ec2InstanceDto",
    "Ec2InstanceState",
    "Ec2InstanceStateChange",
    "TargetHealthDescriptor",
]
