"""The deploy job that owns the server monitors of a deployment."""

import logging
import threading

from domain.entities.deployment import Deployment, OtpServer
from domain.entities.job_status import JobStatus

log = logging.getLogger(__name__)


class CompletedServerCounter:
    """Counter shared by all monitors of a deploy job; increments are atomic."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class DeployJob:
    """Deployment context handed to every server monitor it dispatches.

    Attributes:
        deployment: Deployment being deployed
        otp_server: Server definition (role, target group, instance types)
        s3_folder_uri: Folder where instances upload their logs (e.g. "s3://bucket/deploy-123")
        custom_region: AWS region override, None for the default region
        status: Progress of the deploy job itself
    """

    def __init__(
        self,
        deployment: Deployment,
        otp_server: OtpServer,
        s3_folder_uri: str,
        custom_region: str | None = None,
    ):
        self.deployment = deployment
        self.otp_server = otp_server
        self.s3_folder_uri = s3_folder_uri.rstrip("/")
        self.custom_region = custom_region
        self.status = JobStatus(message=f"Deploying {deployment.name} to {otp_server.name}")
        self._completed_servers = CompletedServerCounter()

    @property
    def deployment_id(self) -> str:
        return self.deployment.id

    @property
    def completed_servers(self) -> int:
        return self._completed_servers.value

    def increment_completed_servers(self) -> int:
        count = self._completed_servers.increment()
        log.info(f"Deployment {self.deployment_id}: {count} server(s) completed")
        return count

    def is_build_only_server(self, graph_already_built: bool) -> bool:
        """Whether an instance's only task is to build the graph.

        Either the deployment only asks for a graph, or the server builds graphs on a
        dedicated instance type/image and no graph has been built yet.
        """
        if self.deployment.build_graph_only:
            return True
        ec2_info = self.otp_server.ec2_info
        return not graph_already_built and ec2_info is not None and ec2_info.has_separate_graph_build_config()

    def get_otp_runner_log_path(self, instance_id: str) -> str:
        """Expected location of the otp-runner log uploaded by the instance."""
        return f"{self.s3_folder_uri}/{instance_id}-otp-runner.log"
