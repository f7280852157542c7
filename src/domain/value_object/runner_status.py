"""Value Object for the otp-runner status file."""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RunnerStatus:
    """Snapshot of the status otp-runner writes while building/loading a graph.

    Each poll yields a fresh, independent snapshot.
    """

    error: bool = False
    message: str = ""
    percent_progress: float = 0.0
    server_started: bool = False
    graph_uploaded: bool = False

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "RunnerStatus":
        """Parse the JSON status document served by the instance.

        Flags count only when they are JSON booleans, and a progress value that is
        not numeric reads as 0 so that a reported error is never lost.

        Args:
            data: Decoded JSON body of the status file

        Returns:
            RunnerStatus instance
        """
        return cls(
            error=data.get("error") is True,
            message=str(data.get("message") or ""),
            percent_progress=cls._parse_progress(data),
            server_started=data.get("serverStarted") is True,
            graph_uploaded=data.get("graphUploaded") is True,
        )

    @staticmethod
    def _parse_progress(data: dict[str, Any]) -> float:
        # otp-runner writes pctProgress; percentProgress is accepted as well.
        progress = data.get("pctProgress", data.get("percentProgress", 0))
        try:
            value = float(progress or 0)
        except (TypeError, ValueError):
            return 0.0
        if math.isnan(value):
            return 0.0
        return max(0.0, min(100.0, value))

    def indicates_completion(self, build_only: bool) -> bool:
        """Whether otp-runner has finished the work expected from this instance.

        A build-only instance is done once the graph is uploaded; any other
        instance is done once the OTP server has started.
        """
        if build_only:
            return self.graph_uploaded
        return self.server_started
