"""Results returned by lifecycle operations."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any


@dataclass
class LaunchResult:
    """Public address and id of a launched instance."""
    instance_id: str
    public_ip: Optional[str] = None
    instance_type: str = ""
    secondary_interface_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "public-ip": self.public_ip or "",
            "instance-id": self.instance_id,
        }


@dataclass
class CleanupReport:
    """Outcome of best-effort interface cleanup after a terminate."""
    instance_id: str
    deleted: List[str] = field(default_factory=list)
    already_gone: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def is_clean(self) -> bool:
        return not self.failed

    @property
    def attempted(self) -> int:
        return len(self.deleted) + len(self.already_gone) + len(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instance-id": self.instance_id,
            "deleted": list(self.deleted),
            "already-gone": list(self.already_gone),
            "failed": dict(self.failed),
        }
