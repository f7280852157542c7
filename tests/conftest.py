"""Shared fixtures for the deployment monitor tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from application.settings import Settings
from domain.entities.deploy_job import DeployJob
from domain.entities.deployment import Deployment, Ec2Info, OtpServer
from integration.models import Ec2InstanceDto, Ec2InstanceState
from integration.services.aws_ec2_api_client import AwsEc2Client
from integration.services.aws_elb_api_client import AwsElbClient
from integration.services.otp_server_http_client import OtpServerHttpClient

INSTANCE_ID = "i-0123456789abcdef0"
TARGET_GROUP_ARN = "arn:aws:elasticloadbalancing:us-east-1:123456789012:targetgroup/otp/abc"
S3_FOLDER_URI = "s3://datatools-deployments/deploy-123"

RUNNING = Ec2InstanceState(code=16, name="running")
STOPPED = Ec2InstanceState(code=80, name="stopped")
TERMINATED = Ec2InstanceState(code=48, name="terminated")


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(monitor_poll_delay_seconds=4.0)


def make_deploy_job(
    build_graph_only: bool = False,
    target_group_arn: str | None = TARGET_GROUP_ARN,
    build_instance_type: str | None = None,
    custom_region: str | None = None,
) -> DeployJob:
    otp_server = OtpServer(
        id="server-1",
        name="Production OTP",
        role_arn="arn:aws:iam::123456789012:role/otp",
        ec2_info=Ec2Info(
            target_group_arn=target_group_arn,
            instance_type="r5.large",
            build_instance_type=build_instance_type,
        ),
    )
    deployment = Deployment(id="deployment-1", name="Spring service", build_graph_only=build_graph_only)
    return DeployJob(deployment, otp_server, s3_folder_uri=S3_FOLDER_URI, custom_region=custom_region)


@pytest.fixture
def deploy_job() -> DeployJob:
    return make_deploy_job()


@pytest.fixture
def instance() -> Ec2InstanceDto:
    return Ec2InstanceDto(instance_id=INSTANCE_ID, public_ip="10.0.0.1", state_code=0, state_name="pending")


@pytest.fixture
def mock_ec2_client() -> MagicMock:
    client = MagicMock(spec=AwsEc2Client)
    client.get_instance_state.return_value = RUNNING
    client.terminate_instance.return_value = None
    return client


@pytest.fixture
def mock_elb_client() -> MagicMock:
    client = MagicMock(spec=AwsElbClient)
    client.describe_target_health.return_value = []
    return client


@pytest.fixture
def mock_http_client() -> MagicMock:
    client = MagicMock(spec=OtpServerHttpClient)
    client.is_reachable = AsyncMock(return_value=True)
    client.fetch_runner_status = AsyncMock(return_value=None)
    return client
