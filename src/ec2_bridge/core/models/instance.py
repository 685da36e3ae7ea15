"""Simple Instance Data Models

Simple data models for EC2 instance lifecycle management."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Any

from .network import NetworkInterfaceInfo
from .tags import tags_to_dict


class InstanceState(Enum):
    """EC2 Instance states."""
    PENDING = "pending"
    RUNNING = "running"
    REBOOTING = "rebooting"
    STOPPING = "stopping"
    STOPPED = "stopped"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"


@dataclass
class InstanceInfo:
    """Simple instance information model."""
    instance_id: str
    name: str
    state: str
    instance_type: str = ""
    availability_zone: str = ""
    public_ip: Optional[str] = None
    private_ip: Optional[str] = None
    network_interfaces: List[NetworkInterfaceInfo] = field(default_factory=list)
    volume_ids: List[str] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def is_running(self) -> bool:
        return self.state == InstanceState.RUNNING.value

    @property
    def is_terminated(self) -> bool:
        return self.state in (InstanceState.SHUTTING_DOWN.value, InstanceState.TERMINATED.value)

    @property
    def interface_ids(self) -> List[str]:
        return [eni.interface_id for eni in self.network_interfaces]

    @classmethod
    def from_aws_instance(cls, instance: Dict[str, Any]) -> "InstanceInfo":
        """Create InstanceInfo from AWS instance data."""
        tags = tags_to_dict(instance.get("Tags", []))
        interfaces = [
            NetworkInterfaceInfo.from_instance_interface(eni, instance["InstanceId"])
            for eni in instance.get("NetworkInterfaces", [])
        ]
        volume_ids = [
            mapping["Ebs"]["VolumeId"]
            for mapping in instance.get("BlockDeviceMappings", [])
            if mapping.get("Ebs", {}).get("VolumeId")
        ]

        return cls(
            instance_id=instance["InstanceId"],
            name=tags.get("Name", ""),
            state=instance.get("State", {}).get("Name", ""),
            instance_type=instance.get("InstanceType", ""),
            availability_zone=instance.get("Placement", {}).get("AvailabilityZone", ""),
            public_ip=instance.get("PublicIpAddress"),
            private_ip=instance.get("PrivateIpAddress"),
            network_interfaces=interfaces,
            volume_ids=volume_ids,
            tags=tags,
        )
