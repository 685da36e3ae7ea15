"""Core EC2 lifecycle module."""

from .aws import EC2Gateway, create_ec2_gateway
from .concurrency import CancellationToken, ResourceLocks
from .models import (
    InstanceInfo,
    VolumeInfo,
    SnapshotInfo,
    ImageInfo,
    NetworkInterfaceInfo,
    TagInfo,
    LaunchResult,
    CleanupReport,
    InstanceState,
    VolumeState,
    VirtualizationType,
)
from .resolver import ResourceResolver
from .orchestrator import (
    LifecycleOrchestrator,
    LifecycleSettings,
    create_orchestrator,
    select_instance_type,
)

__all__ = [
    # AWS gateway
    "EC2Gateway",
    "create_ec2_gateway",
    # Lifecycle
    "ResourceResolver",
    "LifecycleOrchestrator",
    "LifecycleSettings",
    "create_orchestrator",
    "select_instance_type",
    "CancellationToken",
    "ResourceLocks",
    # Models
    "InstanceInfo",
    "VolumeInfo",
    "SnapshotInfo",
    "ImageInfo",
    "NetworkInterfaceInfo",
    "TagInfo",
    "LaunchResult",
    "CleanupReport",
    # Enums
    "InstanceState",
    "VolumeState",
    "VirtualizationType",
]
