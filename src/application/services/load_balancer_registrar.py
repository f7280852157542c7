"""Registers a server with its load balancer target group."""

import asyncio
import logging

from application.services.poll_loop import HealthCheck, PollLoop
from domain.value_object.monitoring import PollOutcome
from integration.services.aws_elb_api_client import AwsElbClient

log = logging.getLogger(__name__)


class LoadBalancerRegistrar:
    """Registers an instance with a target group and waits until it is listed.

    Presence in describe_target_health confirms registration; the target's
    health state (initial, healthy, ...) is not inspected.
    """

    def __init__(self, aws_elb_client: AwsElbClient, poll_loop: PollLoop):
        self.aws_elb_client = aws_elb_client
        self.poll_loop = poll_loop

    def is_registered(self, target_group_arn: str, instance_id: str) -> bool:
        targets = self.aws_elb_client.describe_target_health(target_group_arn)
        return any(target.target_id == instance_id for target in targets)

    async def register_and_confirm(
        self,
        target_group_arn: str,
        instance_id: str,
        health_check: HealthCheck,
        deadline_seconds: float = 120,
    ) -> PollOutcome:
        """Register `instance_id` until the target group lists it or the deadline elapses.

        register_targets is idempotent, so it is reissued on every attempt. The
        blocking ELB calls run in the default executor.

        Returns:
            PollOutcome of the underlying poll loop
        """

        def register_and_check() -> bool:
            self.aws_elb_client.register_target(target_group_arn, instance_id)
            if self.is_registered(target_group_arn, instance_id):
                log.info(f"Instance {instance_id} successfully added to target group!")
                return True
            return False

        async def register_and_check_async() -> bool:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, register_and_check)

        return await self.poll_loop.run(
            register_and_check_async,
            health_check,
            deadline_seconds,
            waiting_for="instance to register with ELB target group",
        )
