import logging
from dataclasses import dataclass
from typing import Any

import boto3  # type: ignore
from botocore.exceptions import ClientError, ParamValidationError  # type: ignore

from integration.enums import AwsRegion
from integration.exceptions import (
    EC2AuthenticationException,
    EC2InstanceNotFoundException,
    EC2InstanceOperationException,
    EC2InvalidParameterException,
    EC2QuotaExceededException,
    IntegrationException,
)
from integration.models import Ec2InstanceState, Ec2InstanceStateChange

log = logging.getLogger(__name__)
logging.getLogger("botocore").setLevel(logging.INFO)
logging.getLogger("urlib3").setLevel(logging.INFO)


@dataclass
class AwsAccountCredentials:
    aws_access_key_id: str

    aws_secret_access_key: str

    aws_session_token: str | None = None

    def as_client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "aws_access_key_id": self.aws_access_key_id,
            "aws_secret_access_key": self.aws_secret_access_key,
        }
        if self.aws_session_token:
            kwargs["aws_session_token"] = self.aws_session_token
        return kwargs


def parse_aws_error(error: ClientError, operation: str) -> Exception:
    """Parse AWS ClientError and return appropriate specific exception.

    Args:
        error: The boto3 ClientError
        operation: Description of the operation that failed

    Returns:
        Specific exception type based on error code
    """
    error_code = error.response.get("Error", {}).get("Code", "")
    error_message = error.response.get("Error", {}).get("Message", str(error))

    # Authentication/Authorization errors
    if error_code in (
        "UnauthorizedOperation",
        "InvalidClientTokenId",
        "SignatureDoesNotMatch",
        "AccessDenied",
        "ExpiredToken",
    ):
        return EC2AuthenticationException(
            f"{operation} - Authentication failed: {error_message}"
        )

    # Instance not found
    if error_code in ("InvalidInstanceID.NotFound", "InvalidInstanceId.NotFound"):
        return EC2InstanceNotFoundException(
            f"{operation} - Instance not found: {error_message}"
        )

    # Quota/Limit errors
    if error_code in ("RequestLimitExceeded", "Throttling"):
        return EC2QuotaExceededException(
            f"{operation} - AWS quota exceeded: {error_message}"
        )

    # Invalid parameters
    if error_code in (
        "InvalidParameterValue",
        "InvalidParameter",
        "InvalidInstanceID.Malformed",
    ):
        return EC2InvalidParameterException(
            f"{operation} - Invalid parameter: {error_message}"
        )

    # Generic AWS error
    return IntegrationException(
        f"{operation} - AWS error [{error_code}]: {error_message}"
    )


class AwsEc2Client:
    """EC2 control plane client scoped to one set of credentials and one region."""

    aws_account_credentials: AwsAccountCredentials

    def __init__(
        self,
        aws_account_credentials: AwsAccountCredentials,
        region_name: str = AwsRegion.US_EAST_1.value,
    ):
        self.aws_account_credentials = aws_account_credentials
        self.region_name = region_name
        self._ec2_client = None

    def _get_client(self):
        if self._ec2_client is None:
            self._ec2_client = boto3.client(
                "ec2",
                region_name=self.region_name,
                **self.aws_account_credentials.as_client_kwargs(),
            )
        return self._ec2_client

    def get_instance_state(self, instance_id: str) -> Ec2InstanceState | None:
        """Gets the current lifecycle state of the given EC2 instance.

        Args:
            instance_id: The AWS identifier of the EC2 instance.

        Returns:
            Ec2InstanceState, or None if the instance is absent from the response
            (describe_instances can lag behind run_instances).

        Raises:
            IntegrationException: If the describe call fails.
        """
        try:
            # https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/ec2/client/describe_instances.html
            res_dict = self._get_client().describe_instances(InstanceIds=[instance_id])
            for reservation in res_dict.get("Reservations", []):
                for instance in reservation.get("Instances", []):
                    if instance.get("InstanceId") != instance_id:
                        continue
                    state = instance.get("State", {})
                    return Ec2InstanceState(
                        code=state.get("Code", 0), name=state.get("Name", "unknown")
                    )

            log.debug(
                f"Instance {instance_id} not present in describe_instances response in region {self.region_name}"
            )
            return None

        except ParamValidationError as e:
            log.error(f"Error describing instance - invalid parameters: {e}")
            raise EC2InvalidParameterException(f"Invalid instance ID provided: {e}")
        except ClientError as e:
            log.error(
                f"Error describing instance {instance_id} in region {self.region_name}: {e}"
            )
            raise parse_aws_error(e, f"Describe instance {instance_id}")

    def terminate_instance(self, instance_id: str) -> Ec2InstanceStateChange | None:
        """Terminates a single EC2 instance.

        Terminating an already terminated instance succeeds and reports the
        terminated state again.

        Args:
            instance_id: The AWS identifier of the EC2 instance to terminate.

        Returns:
            The instance state change reported by AWS, or None if AWS reported
            no terminating instance.

        Raises:
            EC2InstanceNotFoundException: If instance not found.
            EC2InstanceOperationException: If the termination operation fails.
            EC2AuthenticationException: If credentials are invalid.
        """
        try:
            # https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/ec2/client/terminate_instances.html
            response = self._get_client().terminate_instances(InstanceIds=[instance_id])
            log.info(
                f"EC2 instance {instance_id} termination requested in region {self.region_name}"
            )
            changes = response.get("TerminatingInstances", []) if response else []
            if not changes:
                return None

            change = changes[0]
            previous = change.get("PreviousState", {})
            current = change.get("CurrentState", {})
            return Ec2InstanceStateChange(
                instance_id=change.get("InstanceId", instance_id),
                previous_state=Ec2InstanceState(
                    code=previous.get("Code", 0), name=previous.get("Name", "unknown")
                ),
                current_state=Ec2InstanceState(
                    code=current.get("Code", 0), name=current.get("Name", "unknown")
                ),
            )

        except ParamValidationError as e:
            log.error(f"Error terminating instance - invalid parameters: {e}")
            raise EC2InvalidParameterException(f"Invalid instance ID provided: {e}")
        except ClientError as e:
            log.error(
                f"Error terminating instance {instance_id} in region {self.region_name}: {e}"
            )
            raise parse_aws_error(e, f"Terminate instance {instance_id}")
        except ValueError as e:
            log.error(f"Error terminating instance - invalid value: {e}")
            raise EC2InstanceOperationException(f"Failed to terminate instance: {e}")
