"""Simple data models for AWS AMI images."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any

from .tags import tags_to_dict


class VirtualizationType(Enum):
    """AMI virtualization types."""
    HVM = "hvm"
    PARAVIRTUAL = "paravirtual"


@dataclass
class ImageInfo:
    """Simple AMI information model."""
    image_id: str
    name: str
    state: str = "available"
    virtualization_type: str = "hvm"
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def is_hvm(self) -> bool:
        return self.virtualization_type == VirtualizationType.HVM.value

    @classmethod
    def from_aws_image(cls, image: Dict[str, Any]) -> "ImageInfo":
        """Create ImageInfo from AWS image data."""
        return cls(
            image_id=image["ImageId"],
            name=image.get("Name", ""),
            state=image.get("State", "available"),
            virtualization_type=image.get("VirtualizationType", ""),
            tags=tags_to_dict(image.get("Tags", [])),
        )
