import logging

import boto3  # type: ignore
from botocore.exceptions import ClientError, ParamValidationError  # type: ignore

from integration.exceptions import STSAssumeRoleException
from integration.services.aws_ec2_api_client import AwsAccountCredentials

log = logging.getLogger(__name__)


class AwsStsClient:
    """Obtains temporary credentials for the IAM role attached to an OTP server."""

    def __init__(self, aws_account_credentials: AwsAccountCredentials):
        self.aws_account_credentials = aws_account_credentials

    def assume_role(
        self,
        role_arn: str,
        session_name: str,
        duration_seconds: int = 3600,
    ) -> AwsAccountCredentials:
        """Assume the given role and return its temporary credentials.

        Args:
            role_arn: ARN of the role to assume.
            session_name: Name recorded in CloudTrail for the role session.
            duration_seconds: Lifetime of the temporary credentials.

        Returns:
            AwsAccountCredentials carrying a session token.

        Raises:
            STSAssumeRoleException: If the role cannot be assumed.
        """
        try:
            sts_client = boto3.client("sts", **self.aws_account_credentials.as_client_kwargs())
            # https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/sts/client/assume_role.html
            response = sts_client.assume_role(
                RoleArn=role_arn,
                RoleSessionName=session_name,
                DurationSeconds=duration_seconds,
            )
            credentials = response["Credentials"]
            log.info(f"Assumed role {role_arn} as session {session_name}")
            return AwsAccountCredentials(
                aws_access_key_id=credentials["AccessKeyId"],
                aws_secret_access_key=credentials["SecretAccessKey"],
                aws_session_token=credentials["SessionToken"],
            )
        except (ClientError, ParamValidationError, KeyError) as e:
            log.error(f"Error while assuming role {role_arn}: {e}")
            raise STSAssumeRoleException(f"Could not assume role {role_arn}: {e}")
