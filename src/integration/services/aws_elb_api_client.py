import logging

import boto3  # type: ignore
from botocore.exceptions import ClientError, ParamValidationError  # type: ignore

from integration.enums import AwsRegion
from integration.exceptions import (
    ELBTargetGroupNotFoundException,
    ELBTargetRegistrationException,
    IntegrationException,
)
from integration.models import TargetHealthDescriptor
from integration.services.aws_ec2_api_client import AwsAccountCredentials

log = logging.getLogger(__name__)


class AwsElbClient:
    """Elastic Load Balancing (v2) client scoped to one set of credentials and one region."""

    def __init__(
        self,
        aws_account_credentials: AwsAccountCredentials,
        region_name: str = AwsRegion.US_EAST_1.value,
    ):
        self.aws_account_credentials = aws_account_credentials
        self.region_name = region_name
        self._elb_client = None

    def _get_client(self):
        if self._elb_client is None:
            self._elb_client = boto3.client(
                "elbv2",
                region_name=self.region_name,
                **self.aws_account_credentials.as_client_kwargs(),
            )
        return self._elb_client

    def _parse_aws_error(self, error: ClientError, operation: str) -> Exception:
        error_code = error.response.get("Error", {}).get("Code", "")
        error_message = error.response.get("Error", {}).get("Message", str(error))

        if error_code == "TargetGroupNotFound":
            return ELBTargetGroupNotFoundException(
                f"{operation} - Target group not found: {error_message}"
            )
        if error_code in ("InvalidTarget", "TooManyTargets", "TooManyRegistrationsForTargetId"):
            return ELBTargetRegistrationException(
                f"{operation} - Target rejected: {error_message}"
            )
        return IntegrationException(
            f"{operation} - AWS error [{error_code}]: {error_message}"
        )

    def register_target(self, target_group_arn: str, instance_id: str) -> None:
        """Registers an EC2 instance with a target group.

        Registering an instance that is already registered is a no-op on the AWS side.

        Args:
            target_group_arn: ARN of the load balancer target group.
            instance_id: The AWS identifier of the EC2 instance.

        Raises:
            ELBTargetGroupNotFoundException: If the target group does not exist.
            ELBTargetRegistrationException: If the target is rejected.
        """
        try:
            # https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/elbv2/client/register_targets.html
            self._get_client().register_targets(
                TargetGroupArn=target_group_arn,
                Targets=[{"Id": instance_id}],
            )
            log.debug(f"Registered target {instance_id} with {target_group_arn}")
        except ParamValidationError as e:
            log.error(f"Error registering target - invalid parameters: {e}")
            raise ELBTargetRegistrationException(f"Invalid registration parameters: {e}")
        except ClientError as e:
            log.error(f"Error registering target {instance_id} with {target_group_arn}: {e}")
            raise self._parse_aws_error(e, f"Register target {instance_id}")

    def describe_target_health(self, target_group_arn: str) -> list[TargetHealthDescriptor]:
        """Lists the targets of a target group with their health.

        Args:
            target_group_arn: ARN of the load balancer target group.

        Returns:
            List of TargetHealthDescriptor, one per registered target.

        Raises:
            ELBTargetGroupNotFoundException: If the target group does not exist.
        """
        try:
            # https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/elbv2/client/describe_target_health.html
            response = self._get_client().describe_target_health(TargetGroupArn=target_group_arn)
            descriptors = []
            for description in response.get("TargetHealthDescriptions", []):
                target = description.get("Target", {})
                health = description.get("TargetHealth", {})
                descriptors.append(
                    TargetHealthDescriptor(
                        target_id=target.get("Id", ""),
                        port=target.get("Port"),
                        state=health.get("State", "unknown"),
                        reason=health.get("Reason"),
                    )
                )
            return descriptors
        except ParamValidationError as e:
            log.error(f"Error describing target health - invalid parameters: {e}")
            raise IntegrationException(f"Invalid target group parameter: {e}")
        except ClientError as e:
            log.error(f"Error describing target health of {target_group_arn}: {e}")
            raise self._parse_aws_error(e, f"Describe target health of {target_group_arn}")
