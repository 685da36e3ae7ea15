"""Simple data models for AWS EBS snapshots."""

from dataclasses import dataclass, field
from typing import Dict, Any

from .tags import tags_to_dict


@dataclass
class SnapshotInfo:
    """Simple snapshot information model."""
    snapshot_id: str
    volume_id: str
    volume_size: int
    state: str
    description: str = ""
    encrypted: bool = False
    tags: Dict[str, str] = field(default_factory=dict)

    def matches_external_id(self, external_id: str) -> bool:
        """True when the description carries the external snapshot id."""
        return bool(external_id) and external_id in self.description

    @classmethod
    def from_aws_snapshot(cls, snapshot: Dict[str, Any]) -> "SnapshotInfo":
        """Create SnapshotInfo from AWS snapshot data."""
        return cls(
            snapshot_id=snapshot["SnapshotId"],
            volume_id=snapshot.get("VolumeId", ""),
            volume_size=snapshot.get("VolumeSize", 0),
            state=snapshot.get("State", "completed"),
            description=snapshot.get("Description", ""),
            encrypted=snapshot.get("Encrypted", False),
            tags=tags_to_dict(snapshot.get("Tags", [])),
        )
