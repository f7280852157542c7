"""Runs one server monitor per launched instance of a deploy job."""

import asyncio
import logging

from opentelemetry import trace

from application.jobs.monitor_server_status_job import MonitorServerStatusJob
from application.settings import Settings, app_settings
from domain.entities.deploy_job import DeployJob
from domain.entities.job_status import JobStatus
from integration.models import Ec2InstanceDto
from integration.services.aws_client_factory import AwsClientFactory
from integration.services.aws_ec2_api_client import AwsAccountCredentials
from integration.services.otp_server_http_client import OtpServerHttpClient

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class ServerMonitoringService:
    """Creates server monitors and runs them concurrently.

    Monitors share nothing but the deploy job's completed-server counter.
    """

    def __init__(
        self,
        aws_client_factory: AwsClientFactory,
        http_client: OtpServerHttpClient | None = None,
        settings: Settings = app_settings,
    ):
        self.aws_client_factory = aws_client_factory
        self.settings = settings
        self.http_client = http_client or OtpServerHttpClient(timeout=settings.otp_http_timeout_seconds)

    @classmethod
    def from_settings(cls, settings: Settings = app_settings) -> "ServerMonitoringService":
        credentials = AwsAccountCredentials(
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            aws_session_token=settings.aws_session_token,
        )
        return cls(AwsClientFactory(credentials, default_region=settings.aws_region), settings=settings)

    def create_monitor(
        self,
        deploy_job: DeployJob,
        instance: Ec2InstanceDto,
        graph_already_built: bool,
    ) -> MonitorServerStatusJob:
        """Create a monitor with its own AWS clients (role credentials, region override)."""
        aws_ec2_client, aws_elb_client = self.aws_client_factory.create(
            role_arn=deploy_job.otp_server.role_arn,
            session_name=f"monitor-{instance.instance_id}",
            custom_region=deploy_job.custom_region,
        )
        return MonitorServerStatusJob(
            deploy_job=deploy_job,
            instance=instance,
            graph_already_built=graph_already_built,
            aws_ec2_client=aws_ec2_client,
            aws_elb_client=aws_elb_client,
            http_client=self.http_client,
            settings=self.settings,
        )

    async def run_monitors_async(self, monitors: list[MonitorServerStatusJob]) -> list[JobStatus]:
        """Run every monitor concurrently; none waits for another to finish.

        Returns:
            Final job status of every monitor, in the order given
        """
        return list(await asyncio.gather(*[monitor.run_async() for monitor in monitors]))

    async def monitor_servers_async(
        self,
        deploy_job: DeployJob,
        instances: list[Ec2InstanceDto],
        graph_already_built: bool,
    ) -> list[JobStatus]:
        """Monitor every instance of a deploy job until each one succeeds or fails.

        Args:
            deploy_job: Owning deploy job
            instances: Launched instances to monitor
            graph_already_built: Whether the graph was built before these instances launched

        Returns:
            Final job status of every monitor, in the order of `instances`
        """
        with tracer.start_as_current_span("monitor_servers") as span:
            span.set_attribute("deployment.id", deploy_job.deployment_id)
            span.set_attribute("servers.count", len(instances))

            monitors = [self.create_monitor(deploy_job, instance, graph_already_built) for instance in instances]
            log.info(f"🔄 Monitoring {len(monitors)} server(s) for deployment {deploy_job.deployment_id}")
            statuses = await self.run_monitors_async(monitors)

            failed = sum(1 for status in statuses if status.error)
            span.set_attribute("servers.failed", failed)
            span.set_attribute("servers.completed", deploy_job.completed_servers)
            if failed:
                log.warning(f"⚠️ {failed}/{len(statuses)} server(s) failed for deployment {deploy_job.deployment_id}")
            else:
                log.info(f"✅ All servers completed for deployment {deploy_job.deployment_id}")
            return statuses
