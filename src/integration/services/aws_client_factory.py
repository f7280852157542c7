"""Factory for the per-monitor AWS control plane clients."""

import logging

from integration.enums import AwsRegion
from integration.services.aws_ec2_api_client import AwsAccountCredentials, AwsEc2Client
from integration.services.aws_elb_api_client import AwsElbClient
from integration.services.aws_sts_api_client import AwsStsClient

log = logging.getLogger(__name__)


class AwsClientFactory:
    """Builds EC2 and ELB clients for one monitored instance.

    Each monitor holds its own clients so that credentials (optionally assumed from
    the OTP server's role) and the region override stay scoped to that monitor.
    """

    def __init__(
        self,
        aws_account_credentials: AwsAccountCredentials,
        default_region: str = AwsRegion.US_EAST_1.value,
    ):
        self.aws_account_credentials = aws_account_credentials
        self.default_region = default_region

    def resolve_credentials(self, role_arn: str | None, session_name: str) -> AwsAccountCredentials:
        if not role_arn:
            return self.aws_account_credentials
        return AwsStsClient(self.aws_account_credentials).assume_role(role_arn, session_name)

    def create(
        self,
        role_arn: str | None,
        session_name: str,
        custom_region: str | None = None,
    ) -> tuple[AwsEc2Client, AwsElbClient]:
        """Create EC2 and ELB clients.

        Args:
            role_arn: Role to assume, or None to use the account credentials
            session_name: Role session name (e.g., "monitor-i-0123")
            custom_region: Region override, or None for the default region

        Returns:
            (AwsEc2Client, AwsElbClient) sharing the same credentials and region
        """
        region = custom_region or self.default_region
        credentials = self.resolve_credentials(role_arn, session_name)
        log.debug(f"Creating AWS clients for {session_name} in region {region}")
        return (
            AwsEc2Client(credentials, region_name=region),
            AwsElbClient(credentials, region_name=region),
        )
