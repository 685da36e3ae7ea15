"""Simple data models for EC2 resources."""

# Instance models
from .instance import (
    InstanceState,
    InstanceInfo,
)

# Volume models
from .volume import (
    VolumeState,
    VolumeAttachment,
    VolumeInfo,
)

# Snapshot models
from .snapshot import (
    SnapshotInfo,
)

# AMI models
from .image import (
    VirtualizationType,
    ImageInfo,
)

# Network models
from .network import NetworkInterfaceInfo

# Tag models
from .tags import (
    TagInfo,
    tags_to_dict,
)

# Operation results
from .results import (
    LaunchResult,
    CleanupReport,
)

__all__ = [
    "InstanceState",
    "InstanceInfo",
    "VolumeState",
    "VolumeAttachment",
    "VolumeInfo",
    "SnapshotInfo",
    "VirtualizationType",
    "ImageInfo",
    "NetworkInterfaceInfo",
    "TagInfo",
    "tags_to_dict",
    "LaunchResult",
    "CleanupReport",
]
