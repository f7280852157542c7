"""Domain entities package."""

from .deploy_job import CompletedServerCounter, DeployJob
from .deployment import Deployment, Ec2Info, OtpServer
from .job_status import JobStatus

__all__ = ["CompletedServerCounter", "DeployJob", "Deployment", "Ec2Info", "OtpServer", "JobStatus"]
