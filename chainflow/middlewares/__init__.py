from .error_logger import ErrorLogger
from .serialize import SerializeByRecipient

__all__ = ["ErrorLogger", "SerializeByRecipient"]
