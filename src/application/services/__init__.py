from .instance_health_probe import InstanceHealthProbe
from .load_balancer_registrar import LoadBalancerRegistrar
from .poll_loop import PollLoop

__all__ = [
    "InstanceHealthProbe",
    "LoadBalancerRegistrar",
    "PollLoop",
]
