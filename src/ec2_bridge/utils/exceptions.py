"""Exception classes and validation utilities for the EC2 bridge.

Every error the orchestrator raises derives from ``Ec2BridgeError`` so the
call bridge can turn it into a fault the remote caller can tell apart from
a normal result.
"""

import re
from typing import Optional


class Ec2BridgeError(Exception):
    """Base class for all EC2 bridge errors."""

    fault_code = 1


class ConfigurationError(Ec2BridgeError):
    """Missing or invalid credentials, roles or settings."""

    fault_code = 10


class NoZoneAvailable(ConfigurationError):
    """The provider reported no available availability zone."""

    fault_code = 11


class ResolutionError(Ec2BridgeError):
    """A name or external id could not be mapped to one provider id."""

    fault_code = 20


class AmbiguousSnapshot(ResolutionError):
    """Snapshot description matching yielded zero or several snapshots."""

    fault_code = 21

    def __init__(self, external_id: str, candidates: list):
        self.external_id = external_id
        self.candidates = list(candidates)
        if self.candidates:
            detail = f"{len(self.candidates)} snapshots match: {', '.join(self.candidates)}"
        else:
            detail = "no snapshot matches"
        super().__init__(f"Snapshot for '{external_id}' is not unique or empty ({detail})")


class AmbiguousResource(ResolutionError):
    """More than one live resource carries the same Name tag."""

    fault_code = 22

    def __init__(self, resource_type: str, name: str, candidates: list):
        self.resource_type = resource_type
        self.name = name
        self.candidates = list(candidates)
        super().__init__(
            f"{len(self.candidates)} {resource_type}s are tagged Name={name}: "
            f"{', '.join(self.candidates)}"
        )


class LaunchTimeout(Ec2BridgeError):
    """The instance did not reach running within the launch budget."""

    fault_code = 30

    def __init__(self, instance_id: str, timeout: float, last_state: Optional[str]):
        self.instance_id = instance_id
        self.timeout = timeout
        self.last_state = last_state
        super().__init__(
            f"Timed out after {timeout}s waiting for {instance_id} to be running "
            f"(last state: {last_state or 'unknown'})"
        )


class OperationCancelled(Ec2BridgeError):
    """A wait was abandoned through its cancellation token."""

    fault_code = 31


class ProviderError(Ec2BridgeError):
    """The provider rejected a request."""

    fault_code = 40

    def __init__(self, message: str, code: str = "", operation: str = ""):
        self.code = code
        self.operation = operation
        super().__init__(message)


class TerminateRejected(ProviderError):
    """Terminate was accepted but no instance began terminating."""

    fault_code = 41


class CLIError(Ec2BridgeError):
    """Custom exception for CLI-related errors."""

    fault_code = 50


class ValidationRules:
    """Validation utilities for AWS identifiers."""

    RESOURCE_PREFIXES = {
        "instance": "i-",
        "volume": "vol-",
        "image": "ami-",
        "snapshot": "snap-",
        "subnet": "subnet-",
        "network-interface": "eni-",
    }

    @staticmethod
    def validate_aws_account_id(account_id: str) -> bool:
        """Validate AWS account ID format (12 digits)."""
        return bool(re.match(r"^\d{12}$", account_id))

    @classmethod
    def validate_resource_id(cls, resource_type: str, resource_id: str) -> bool:
        """Validate that an id has the provider prefix for its resource type."""
        prefix = cls.RESOURCE_PREFIXES.get(resource_type)
        if prefix is None:
            raise ValueError(f"Unknown resource type: {resource_type}")
        return bool(re.match(rf"^{re.escape(prefix)}[0-9a-f]{{8,17}}$", resource_id))
