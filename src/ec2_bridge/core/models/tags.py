"""Simple data models for AWS resource tags."""

from dataclasses import dataclass, field
from typing import Dict, List, Any

from ec2_bridge.core.constants import NAME_TAG_KEY


def tags_to_dict(tags: List[Dict[str, Any]]) -> Dict[str, str]:
    """Convert an AWS ``Tags`` list into a key/value dictionary."""
    result = {}
    for tag in tags or []:
        if tag.get("Key"):
            result[tag["Key"]] = tag.get("Value", "")
    return result


@dataclass
class TagInfo:
    """Name tag written on resources at creation, plus any extra tags."""
    name: str
    custom_tags: Dict[str, str] = field(default_factory=dict)

    @property
    def all_tags(self) -> Dict[str, str]:
        tags = {NAME_TAG_KEY: self.name}
        tags.update(self.custom_tags)
        return tags

    def to_aws_tags(self) -> List[Dict[str, str]]:
        """Render as the ``Tags`` list create_tags expects."""
        return [{"Key": k, "Value": v} for k, v in self.all_tags.items()]

    @classmethod
    def from_aws_tags(cls, tags: List[Dict[str, Any]]) -> "TagInfo":
        """Create from an AWS ``Tags`` list."""
        mapping = tags_to_dict(tags)
        name = mapping.pop(NAME_TAG_KEY, "")
        return cls(name=name, custom_tags=mapping)
