class MonitorException(Exception):
    """Base exception for server monitoring errors."""
    pass


class OtpRunnerFailedException(MonitorException):
    """Raised when otp-runner reports an error in its status file."""

    def __init__(self, runner_message: str):
        super().__init__(runner_message)
        self.runner_message = runner_message


class PhaseRegressionException(MonitorException):
    """Raised when a monitor is asked to move back to an earlier phase."""
    pass
