from enum import Enum


class AwsRegion(str, Enum):
    # Default region choices; a deploy job may override with any region name.

    US_EAST_1 = "us-east-1"  # Virginia

    US_EAST_2 = "us-east-2"  # Ohio

    US_WEST_1 = "us-west-1"  # California

    US_WEST_2 = "us-west-2"  # Oregon

    CA_CENTRAL_1 = "ca-central-1"

    EU_WEST_1 = "eu-west-1"  # Ireland

    EU_CENTRAL_1 = "eu-central-1"  # Frankfurt

    AP_SOUTHEAST_2 = "ap-southeast-2"  # Sydney
