"""Simple data models for EBS volumes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Any

from .tags import tags_to_dict


class VolumeState(Enum):
    """EBS volume states."""
    CREATING = "creating"
    AVAILABLE = "available"
    IN_USE = "in-use"
    DELETING = "deleting"
    DELETED = "deleted"
    ERROR = "error"


@dataclass
class VolumeAttachment:
    """Attachment of a volume to an instance."""
    instance_id: str
    device: str
    state: str


@dataclass
class VolumeInfo:
    """Simple volume information model."""
    volume_id: str
    name: str
    size: int
    availability_zone: str
    state: str
    snapshot_id: Optional[str] = None
    attachments: List[VolumeAttachment] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def is_attached(self) -> bool:
        return self.state == VolumeState.IN_USE.value

    def attachment_for(self, instance_id: str) -> Optional[VolumeAttachment]:
        """The live attachment to ``instance_id``, if any."""
        for attachment in self.attachments:
            if attachment.instance_id == instance_id and attachment.state != "detached":
                return attachment
        return None

    @classmethod
    def from_aws_volume(cls, volume: Dict[str, Any]) -> "VolumeInfo":
        """Create VolumeInfo from AWS volume data."""
        tags = tags_to_dict(volume.get("Tags", []))
        attachments = [
            VolumeAttachment(
                instance_id=a.get("InstanceId", ""),
                device=a.get("Device", ""),
                state=a.get("State", ""),
            )
            for a in volume.get("Attachments", [])
        ]

        return cls(
            volume_id=volume["VolumeId"],
            name=tags.get("Name", ""),
            size=volume.get("Size", 0),
            availability_zone=volume.get("AvailabilityZone", ""),
            state=volume.get("State", ""),
            snapshot_id=volume.get("SnapshotId") or None,
            attachments=attachments,
            tags=tags,
        )
