"""Simple data models for EC2 network interfaces."""

from dataclasses import dataclass
from typing import Dict, Optional, Any


@dataclass
class NetworkInterfaceInfo:
    """Simple network interface information model."""
    interface_id: str
    subnet_id: str = ""
    mac_address: str = ""
    instance_id: Optional[str] = None
    device_index: Optional[int] = None
    description: str = ""

    @property
    def is_attached(self) -> bool:
        return self.instance_id is not None

    @classmethod
    def from_aws_interface(cls, eni: Dict[str, Any]) -> "NetworkInterfaceInfo":
        """Create from a describe_network_interfaces / create_network_interface entry."""
        attachment = eni.get("Attachment") or {}
        return cls(
            interface_id=eni["NetworkInterfaceId"],
            subnet_id=eni.get("SubnetId", ""),
            mac_address=eni.get("MacAddress", ""),
            instance_id=attachment.get("InstanceId"),
            device_index=attachment.get("DeviceIndex"),
            description=eni.get("Description", ""),
        )

    @classmethod
    def from_instance_interface(cls, eni: Dict[str, Any], instance_id: str) -> "NetworkInterfaceInfo":
        """Create from the ``NetworkInterfaces`` entry of a described instance."""
        info = cls.from_aws_interface(eni)
        info.instance_id = instance_id
        return info
