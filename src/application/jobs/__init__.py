from .monitor_server_status_job import MonitorServerStatusJob

__all__ = [
    "MonitorServerStatusJob",
]
