from .aws_regions import AwsRegion
from .ec2_instance import Ec2InstanceStateCode

__all__ = [
    "AwsRegion",
    "Ec2InstanceStateCode",
]  # Re-export enums (prevents flake8 F401 unused import warnings)
