from .logger import setup_logger, set_log_level
from .exceptions import (
    Ec2BridgeError,
    ConfigurationError,
    NoZoneAvailable,
    ResolutionError,
    AmbiguousSnapshot,
    AmbiguousResource,
    LaunchTimeout,
    OperationCancelled,
    ProviderError,
    TerminateRejected,
    CLIError,
    ValidationRules,
)
from .session import SessionManager, assume_role
from .config import ConfigManager

__all__ = [
    "setup_logger",
    "set_log_level",
    "Ec2BridgeError",
    "ConfigurationError",
    "NoZoneAvailable",
    "ResolutionError",
    "AmbiguousSnapshot",
    "AmbiguousResource",
    "LaunchTimeout",
    "OperationCancelled",
    "ProviderError",
    "TerminateRejected",
    "CLIError",
    "ValidationRules",
    "SessionManager",
    "assume_role",
    "ConfigManager",
]
