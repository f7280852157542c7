from enum import IntEnum


class Ec2InstanceStateCode(IntEnum):
    """EC2 instance state codes (low byte of the code reported by AWS)."""

    PENDING = 0
    RUNNING = 16
    SHUTTING_DOWN = 32
    TERMINATED = 48
    STOPPING = 64
    STOPPED = 80

    @classmethod
    def is_terminal(cls, code: int) -> bool:
        """Anything past running is either stopped, terminated or about to be."""
        # The high byte is reserved for internal AWS use.
        return (code & 0xFF) > cls.RUNNING

