"""Business metrics for the OTP deployment monitor."""
from opentelemetry import metrics

meter = metrics.get_meter(__name__)

# Counters
monitors_started = meter.create_counter(
    name="otp_deployment_monitor.monitors.started",
    description="Total server monitors started",
    unit="1"
)

monitors_succeeded = meter.create_counter(
    name="otp_deployment_monitor.monitors.succeeded",
    description="Total server monitors that completed successfully",
    unit="1"
)

monitors_failed = meter.create_counter(
    name="otp_deployment_monitor.monitors.failed",
    description="Total server monitor failures",
    unit="1"
)

instances_terminated = meter.create_counter(
    name="otp_deployment_monitor.instances.terminated",
    description="Total instances terminated after a failed monitor",
    unit="1"
)

# Histograms
phase_duration = meter.create_histogram(
    name="otp_deployment_monitor.phase.duration",
    description="Time spent in each monitor phase",
    unit="s"
)
