from .run_logger import RunLogger, read_history

__all__ = ["RunLogger", "read_history"]
