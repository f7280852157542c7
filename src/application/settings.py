"""Application settings configuration."""

import logging
import sys
from typing import Any

from neuroglia.hosting.abstractions import ApplicationSettings

from integration.enums import AwsRegion


class Settings(ApplicationSettings):
    """Deployment monitor settings with AWS credentials and monitoring deadlines."""

    # Debugging Configuration
    debug: bool = False
    environment: str = "development"  # development, production
    log_level: str = "INFO"

    # Application Configuration
    app_name: str = "OTP Deployment Monitor"
    app_version: str = "1.0.0"

    # Observability Configuration
    service_name: str = "otp-deployment-monitor"
    service_version: str = app_version

    # AWS Account Credentials
    aws_access_key_id: str = "YOUR_ACCESS_KEY_ID"
    aws_secret_access_key: str = "YOUR_SECRET_ACCESS_KEY"
    aws_session_token: str | None = None
    aws_region: str = AwsRegion.US_EAST_1.value  # Overridden per deploy job by its custom region

    # OTP Server Endpoints
    otp_runner_status_file: str = "status.json"  # Served at http://<public ip>/<file>
    otp_router_path: str = "otp/routers/default"
    otp_http_timeout_seconds: float = 10.0

    # Server Monitoring Configuration
    # Delay between checks; also gives the user-data script time to upload its log
    # when part of the script fails.
    monitor_poll_delay_seconds: float = 4.0
    monitor_status_file_timeout_seconds: int = 5 * 60
    monitor_runner_timeout_seconds: int = 60 * 60
    monitor_runner_graph_already_built_timeout_seconds: int = 5 * 60 * 60
    monitor_router_timeout_seconds: int = 20 * 60
    monitor_load_balancer_timeout_seconds: int = 2 * 60

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables

    def __init__(self, **kwargs: Any) -> None:
        """Initialize settings."""
        super().__init__(**kwargs)
        if self.monitor_poll_delay_seconds <= 0:
            raise ValueError("monitor_poll_delay_seconds must be positive")


# Instantiate application settings
app_settings = Settings()


def configure_logging(log_level: str = "INFO") -> None:
    """Configure application-wide logging.

    This function configures the root logger and sets appropriate levels for
    third-party libraries to reduce noise.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    # Ensure log_level is uppercase for consistency
    log_level = log_level.upper()

    # Get root logger and clear any existing handlers to prevent duplicates
    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.handlers.clear()

    root_logger.setLevel(log_level)

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = logging.Formatter(log_format)

    # Console handler (always enabled for cloud-native environments)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Set third-party loggers to WARNING to reduce noise
    third_party_loggers = [
        "boto3",
        "botocore",
        "urllib3",
        "httpx",
        "httpcore",
        "httpcore.http11",
        "httpcore.connection",
        "asyncio",
    ]

    for logger_name in third_party_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
