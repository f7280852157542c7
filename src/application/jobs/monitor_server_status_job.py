"""Monitor of a freshly launched OTP server.

A deploy job launches EC2 instances that build or download a transit graph with
otp-runner and then start OpenTripPlanner. One MonitorServerStatusJob follows one
instance until its work is done:

1. wait for otp-runner to publish its status file,
2. wait for otp-runner to report completion (graph uploaded, or server started),
3. stop there for build-only servers,
4. otherwise wait for the OTP router to answer and register the instance with the
   load balancer target group.

Every wait is bounded by a deadline and aborts as soon as the instance is seen
stopping or terminated. A failed job always terminates its instance.
"""

import asyncio
import logging
import time
import traceback
import uuid
from typing import Any, Awaitable

from opentelemetry import trace

from application.services.instance_health_probe import InstanceHealthProbe
from application.services.load_balancer_registrar import LoadBalancerRegistrar
from application.services.poll_loop import Action, Clock, PollLoop, Sleep
from application.settings import Settings, app_settings
from domain.entities.deploy_job import DeployJob
from domain.entities.job_status import JobStatus
from domain.enums import MonitorFailureReason, MonitorPhase
from domain.exceptions import OtpRunnerFailedException, PhaseRegressionException
from domain.value_object.monitoring import InstanceHealth, PollOutcome
from integration.exceptions import IntegrationException
from integration.models import Ec2InstanceDto, Ec2InstanceStateChange
from integration.services.aws_ec2_api_client import AwsEc2Client
from integration.services.aws_elb_api_client import AwsElbClient
from integration.services.otp_server_http_client import OtpServerHttpClient
from observability.metrics import (
    instances_terminated,
    monitors_failed,
    monitors_started,
    monitors_succeeded,
    phase_duration,
)

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class MonitorServerStatusJob:
    """Follows one EC2 instance from launch until it serves traffic (or fails).

    Attributes:
        deploy_job: Owning deploy job (deployment, server definition, log folder, counter)
        instance: The monitored EC2 instance
        graph_already_built: Whether the graph was built by another instance
        status: Progress record read by external observers
        phase: Current monitor phase
        graph_task_seconds: Time otp-runner took to build/download the graph
        termination: State change reported when the instance was terminated after a failure
    """

    def __init__(
        self,
        deploy_job: DeployJob,
        instance: Ec2InstanceDto,
        graph_already_built: bool,
        aws_ec2_client: AwsEc2Client,
        aws_elb_client: AwsElbClient,
        http_client: OtpServerHttpClient | None = None,
        settings: Settings = app_settings,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        self.job_id = str(uuid.uuid4())
        self.name = f"Monitor server setup {instance.public_ip}"
        self.deploy_job = deploy_job
        self.instance = instance
        self.graph_already_built = graph_already_built
        self.aws_ec2_client = aws_ec2_client
        self.settings = settings
        self.http_client = http_client or OtpServerHttpClient(timeout=settings.otp_http_timeout_seconds)

        self.status = JobStatus(message="Checking server status...")
        self.phase = MonitorPhase.CREATED
        self.failure_reason: MonitorFailureReason | None = None
        self.graph_task_seconds: int | None = None
        self.termination: Ec2InstanceStateChange | None = None

        self._cancellation = asyncio.Event()
        self._loop: asyncio.AbstractEventLoop | None = None
        self.poll_loop = PollLoop(
            delay_seconds=settings.monitor_poll_delay_seconds,
            clock=clock,
            sleep=sleep,
            cancellation=self._cancellation,
        )
        self.health_probe = InstanceHealthProbe(aws_ec2_client)
        self.registrar = LoadBalancerRegistrar(aws_elb_client, self.poll_loop)

    @property
    def instance_id(self) -> str:
        return self.instance.instance_id

    @property
    def deployment_id(self) -> str:
        return self.deploy_job.deployment_id

    @property
    def otp_runner_log_path(self) -> str:
        """Expected path to the otp-runner log the instance uploads to S3."""
        return self.deploy_job.get_otp_runner_log_path(self.instance_id)

    def is_build_only_server(self) -> bool:
        return self.deploy_job.is_build_only_server(self.graph_already_built)

    def cancel(self) -> None:
        """Abort the job at its next health check; the instance is then terminated.

        Safe to call from any thread: while the job runs, the cancellation is handed
        to its event loop.
        """
        log.info(f"Cancellation requested for monitor of instance {self.instance_id}")
        loop = self._loop
        if loop is None or loop.is_closed():
            self._cancellation.set()
        else:
            loop.call_soon_threadsafe(self._cancellation.set)

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": self.job_id,
            "name": self.name,
            "instance_id": self.instance_id,
            "deployment_id": self.deployment_id,
            "phase": self.phase.value,
            "graph_task_seconds": self.graph_task_seconds,
            "status": self.status.to_dict(),
        }

    async def run_async(self) -> JobStatus:
        """Run the monitor to completion, then terminate the instance if it failed.

        Returns:
            The final job status
        """
        self._loop = asyncio.get_running_loop()
        monitors_started.add(1)
        with tracer.start_as_current_span("monitor_server_status") as span:
            span.set_attribute("ec2.instance_id", self.instance_id)
            span.set_attribute("deployment.id", self.deployment_id)
            try:
                await self._monitor_async()
            except OtpRunnerFailedException as e:
                self._fail(e.runner_message or "otp-runner reported an error.", MonitorFailureReason.RUNNER_ERROR)
            except IntegrationException as e:
                self._fail(
                    f"AWS error while monitoring instance {self.instance_id}: {e}",
                    MonitorFailureReason.CONTROL_PLANE_ERROR,
                )
            except asyncio.CancelledError:
                self._fail("Monitoring task was cancelled.", MonitorFailureReason.CANCELLED)
                raise
            except Exception as e:
                log.error(f"Unexpected error while monitoring instance {self.instance_id}", exc_info=True)
                self._fail(
                    f"Unexpected error while monitoring instance {self.instance_id}: {e}",
                    MonitorFailureReason.UNEXPECTED_ERROR,
                    exception_details=traceback.format_exc(),
                )
            finally:
                self._loop = None
                self._finalize()
                span.set_attribute("monitor.phase", self.phase.value)
                span.set_attribute("monitor.error", self.status.error)
        return self.status

    async def _monitor_async(self) -> None:
        target_group_arn = self.deploy_job.otp_server.target_group_arn
        if not target_group_arn:
            self._fail(
                "There is no load balancer under which to register ec2 instance.",
                MonitorFailureReason.MISSING_TARGET_GROUP,
            )
            return

        ip_url = self.instance.base_url
        status_url = f"{ip_url}/{self.settings.otp_runner_status_file}"

        # Wait for otp-runner to produce its first status file
        if not await self._run_phase(
            MonitorPhase.AWAITING_STATUS_FILE,
            lambda: self.http_client.is_reachable(status_url),
            self.settings.monitor_status_file_timeout_seconds,
            f"otp-runner status file availability check: {status_url}",
            "Job timed out while waiting for otp-runner to produce a status file!",
        ):
            return

        # Wait for otp-runner to write a status that fulfills the expectations of this job
        build_only = self.is_build_only_server()
        runner_timeout = (
            self.settings.monitor_runner_graph_already_built_timeout_seconds
            if self.graph_already_built
            else self.settings.monitor_runner_timeout_seconds
        )
        runner_outcome = await self._run_phase_outcome(
            MonitorPhase.AWAITING_RUNNER_COMPLETION,
            lambda: self._check_for_runner_completion(status_url, build_only),
            runner_timeout,
            f"otp-runner completion check: {status_url}",
        )
        if not self._handle_outcome(runner_outcome, "Job timed out while waiting for otp-runner to finish!"):
            return

        self.graph_task_seconds = int(runner_outcome.elapsed_seconds)
        message = f"Graph build/download completed in {self.graph_task_seconds} seconds!"
        log.info(message)

        # A build-only server is done once the graph is uploaded.
        if build_only:
            self._succeed(message)
            return

        # The router only answers once the graph is loaded.
        router_url = f"{ip_url}/{self.settings.otp_router_path}"
        if not await self._run_phase(
            MonitorPhase.AWAITING_ROUTER,
            lambda: self.http_client.is_reachable(router_url),
            self.settings.monitor_router_timeout_seconds,
            f"router to become available: {router_url}",
            "Job timed out while waiting for trip planner to start up.",
        ):
            return
        self.status.update("Graph loaded!", 90)

        self._advance_to(MonitorPhase.REGISTERING_WITH_LOAD_BALANCER)
        registration_outcome = await self._timed(
            self.registrar.register_and_confirm(
                target_group_arn,
                self.instance_id,
                self._check_instance_health,
                self.settings.monitor_load_balancer_timeout_seconds,
            )
        )
        if not self._handle_outcome(
            registration_outcome,
            "Job timed out while waiting to register EC2 instance with load balancer target group.",
        ):
            return

        self._succeed(
            f"Server successfully registered with load balancer {target_group_arn}. OTP running at {router_url}"
        )
        self.deploy_job.increment_completed_servers()

    async def _check_instance_health(self) -> InstanceHealth:
        return await self.health_probe.check(self.instance_id)

    async def _check_for_runner_completion(self, status_url: str, build_only: bool) -> bool:
        runner_status = await self.http_client.fetch_runner_status(status_url)
        if runner_status is None:
            return False
        if runner_status.error:
            raise OtpRunnerFailedException(runner_status.message)
        self.status.update(runner_status.message or self.status.message, runner_status.percent_progress)
        return runner_status.indicates_completion(build_only)

    async def _run_phase(
        self,
        phase: MonitorPhase,
        action: Action,
        deadline_seconds: float,
        waiting_for: str,
        timeout_message: str,
    ) -> bool:
        outcome = await self._run_phase_outcome(phase, action, deadline_seconds, waiting_for)
        return self._handle_outcome(outcome, timeout_message)

    async def _run_phase_outcome(
        self,
        phase: MonitorPhase,
        action: Action,
        deadline_seconds: float,
        waiting_for: str,
    ) -> PollOutcome:
        self._advance_to(phase)
        return await self._timed(
            self.poll_loop.run(action, self._check_instance_health, deadline_seconds, waiting_for)
        )

    async def _timed(self, poll: Awaitable[PollOutcome]) -> PollOutcome:
        phase = self.phase
        with tracer.start_as_current_span(f"monitor_phase.{phase.value}") as span:
            span.set_attribute("ec2.instance_id", self.instance_id)
            outcome = await poll
            span.set_attribute("poll.status", outcome.status.value)
            span.set_attribute("poll.attempts", outcome.attempts)
        phase_duration.record(outcome.elapsed_seconds, {"phase": phase.value, "status": outcome.status.value})
        return outcome

    def _handle_outcome(self, outcome: PollOutcome, timeout_message: str) -> bool:
        """Fail the job unless the phase completed.

        Returns:
            True if the phase completed
        """
        if outcome.is_completed:
            return True
        if outcome.cancelled:
            self._fail("Job was cancelled before it could complete!", MonitorFailureReason.CANCELLED)
        elif outcome.is_aborted:
            # Whether the termination was accidental or intentional, the deployment must not go on.
            self._fail(
                f"Ec2 Instance was stopped or terminated before job could complete! "
                f"Instance state changed to: {outcome.reason}.",
                MonitorFailureReason.INSTANCE_HEALTH,
            )
        else:
            self._fail(timeout_message, MonitorFailureReason.TIMEOUT)
        return False

    def _advance_to(self, phase: MonitorPhase) -> None:
        if self.phase.is_final or phase.ordinal <= self.phase.ordinal:
            raise PhaseRegressionException(f"Cannot move monitor from {self.phase.value} to {phase.value}")
        log.debug(f"Instance {self.instance_id}: {self.phase.value} -> {phase.value}")
        self.phase = phase

    def _succeed(self, message: str) -> None:
        self.phase = MonitorPhase.SUCCEEDED
        self.status.complete_successfully(message)
        monitors_succeeded.add(1, {"build_only": self.is_build_only_server()})
        log.info(f"{message} View logs at {self.otp_runner_log_path}")

    def _fail(
        self,
        message: str,
        reason: MonitorFailureReason,
        exception_details: str | None = None,
    ) -> None:
        """Fail with a helpful message about where to find the uploaded logs."""
        if self.phase == MonitorPhase.FAILED:
            return
        log.error(message)
        self.phase = MonitorPhase.FAILED
        self.failure_reason = reason
        self.status.fail(f"{message} Check logs at: {self.otp_runner_log_path}", exception_details)
        monitors_failed.add(1, {"reason": reason.value})

    def _finalize(self) -> None:
        """Terminate the instance of a failed job so that nothing is left running."""
        if not self.status.error:
            return

        log.info(f"Terminating instance {self.instance_id} after failed monitoring job")
        try:
            self.termination = self.aws_ec2_client.terminate_instance(self.instance_id)
        except IntegrationException as e:
            log.error(f"Could not terminate instance {self.instance_id}: {e}")
            return

        instances_terminated.add(1)
        if self.termination is None:
            log.warning(f"No termination state change reported for instance {self.instance_id}")
        elif self.termination.is_terminated:
            self.status.add_note("Instance is terminated!")
        else:
            self.status.add_note(f"Instance is {self.termination.current_state.name}.")
