"""Tests for AwsEc2Client."""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, ParamValidationError

from integration.exceptions import (
    EC2AuthenticationException,
    EC2InstanceNotFoundException,
    EC2InvalidParameterException,
    IntegrationException,
)
from integration.services.aws_ec2_api_client import AwsAccountCredentials, AwsEc2Client

INSTANCE_ID = "i-0123456789abcdef0"


def client_error(code: str, message: str = "error") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "DescribeInstances")


@pytest.fixture
def boto_client() -> MagicMock:
    with patch("integration.services.aws_ec2_api_client.boto3.client") as client_factory:
        client = MagicMock()
        client_factory.return_value = client
        yield client


@pytest.fixture
def ec2_client() -> AwsEc2Client:
    credentials = AwsAccountCredentials(aws_access_key_id="AKIA", aws_secret_access_key="secret")
    return AwsEc2Client(credentials, region_name="us-west-2")


class TestGetInstanceState:
    def test_returns_state_of_matching_instance(self, ec2_client, boto_client):
        boto_client.describe_instances.return_value = {
            "Reservations": [
                {"Instances": [{"InstanceId": INSTANCE_ID, "State": {"Code": 16, "Name": "running"}}]}
            ]
        }

        state = ec2_client.get_instance_state(INSTANCE_ID)

        assert state.code == 16
        assert state.name == "running"
        assert state.is_terminal is False
        boto_client.describe_instances.assert_called_once_with(InstanceIds=[INSTANCE_ID])

    def test_absent_instance_returns_none(self, ec2_client, boto_client):
        boto_client.describe_instances.return_value = {"Reservations": []}

        assert ec2_client.get_instance_state(INSTANCE_ID) is None

    def test_client_is_created_once_with_region_and_credentials(self, ec2_client):
        with patch("integration.services.aws_ec2_api_client.boto3.client") as client_factory:
            client_factory.return_value.describe_instances.return_value = {"Reservations": []}

            ec2_client.get_instance_state(INSTANCE_ID)
            ec2_client.get_instance_state(INSTANCE_ID)

        client_factory.assert_called_once_with(
            "ec2",
            region_name="us-west-2",
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
        )

    @pytest.mark.parametrize(
        "code,exception_type",
        [
            ("AuthFailure", IntegrationException),
            ("UnauthorizedOperation", EC2AuthenticationException),
            ("ExpiredToken", EC2AuthenticationException),
            ("InvalidInstanceID.NotFound", EC2InstanceNotFoundException),
            ("InvalidInstanceID.Malformed", EC2InvalidParameterException),
        ],
    )
    def test_client_errors_are_translated(self, ec2_client, boto_client, code, exception_type):
        boto_client.describe_instances.side_effect = client_error(code)

        with pytest.raises(exception_type):
            ec2_client.get_instance_state(INSTANCE_ID)

    def test_param_validation_error(self, ec2_client, boto_client):
        boto_client.describe_instances.side_effect = ParamValidationError(report="bad id")

        with pytest.raises(EC2InvalidParameterException):
            ec2_client.get_instance_state(INSTANCE_ID)


class TestTerminateInstance:
    def test_returns_state_change(self, ec2_client, boto_client):
        boto_client.terminate_instances.return_value = {
            "TerminatingInstances": [
                {
                    "InstanceId": INSTANCE_ID,
                    "PreviousState": {"Code": 16, "Name": "running"},
                    "CurrentState": {"Code": 32, "Name": "shutting-down"},
                }
            ]
        }

        change = ec2_client.terminate_instance(INSTANCE_ID)

        assert change.instance_id == INSTANCE_ID
        assert change.previous_state.name == "running"
        assert change.current_state.code == 32
        assert change.is_terminated is False
        boto_client.terminate_instances.assert_called_once_with(InstanceIds=[INSTANCE_ID])

    def test_already_terminated_instance(self, ec2_client, boto_client):
        boto_client.terminate_instances.return_value = {
            "TerminatingInstances": [
                {
                    "InstanceId": INSTANCE_ID,
                    "PreviousState": {"Code": 48, "Name": "terminated"},
                    "CurrentState": {"Code": 48, "Name": "terminated"},
                }
            ]
        }

        assert ec2_client.terminate_instance(INSTANCE_ID).is_terminated is True

    def test_no_state_change_returns_none(self, ec2_client, boto_client):
        boto_client.terminate_instances.return_value = {"TerminatingInstances": []}

        assert ec2_client.terminate_instance(INSTANCE_ID) is None

    def test_not_found(self, ec2_client, boto_client):
        boto_client.terminate_instances.side_effect = client_error("InvalidInstanceID.NotFound")

        with pytest.raises(EC2InstanceNotFoundException):
            ec2_client.terminate_instance(INSTANCE_ID)
