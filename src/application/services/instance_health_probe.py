"""Classifies the lifecycle state of a monitored EC2 instance."""

import asyncio
import logging

from domain.value_object.monitoring import InstanceHealth
from integration.services.aws_ec2_api_client import AwsEc2Client

log = logging.getLogger(__name__)


class InstanceHealthProbe:
    """Read-only health check against the EC2 control plane.

    pending and running are healthy; stopping, stopped, shutting-down and terminated
    are terminal. Control plane errors propagate as IntegrationException.

    The blocking describe call runs in the default executor so that a slow call
    does not stall the other monitors sharing the event loop.
    """

    def __init__(self, aws_ec2_client: AwsEc2Client):
        self.aws_ec2_client = aws_ec2_client

    async def check(self, instance_id: str) -> InstanceHealth:
        loop = asyncio.get_running_loop()
        state = await loop.run_in_executor(None, self.aws_ec2_client.get_instance_state, instance_id)

        if state is None:
            # Can happen right after launch; not a reason to fail.
            log.debug(f"Instance {instance_id} not reported by EC2 yet, assuming healthy")
            return InstanceHealth.unknown()

        if state.is_terminal:
            log.warning(f"Instance state no longer healthy! {instance_id} changed to: {state.name}")
            return InstanceHealth.terminal(state.name, state.code)

        return InstanceHealth.healthy(state.name, state.code)
