"""EC2 gateway owning the single provider session for the process."""

import threading
from typing import Dict, List, Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from ec2_bridge.core.constants import DEFAULT_AWS_REGION
from ec2_bridge.utils.exceptions import ConfigurationError, NoZoneAvailable, ProviderError
from ec2_bridge.utils.logger import setup_logger
from ec2_bridge.utils.session import SessionManager


class EC2Gateway:
    """One authenticated EC2 client plus the cached availability zone.

    The gateway is constructed once and passed to the resolver and the
    orchestrator. ``connect`` is idempotent and ``zone`` resolves at most
    once; after that both are read-only.
    """

    def __init__(
        self,
        region: Optional[str] = None,
        session: Optional[boto3.Session] = None,
        config=None,
    ):
        """Initialize EC2Gateway.

        Args:
            region: Region for the process lifetime (defaults to the configured one)
            session: Pre-built boto3 session; built from ``config`` when omitted
            config: ConfigManager used to build the session on connect
        """
        self.config = config
        self.region = region or (config.get_aws_region() if config else DEFAULT_AWS_REGION)
        self.session = session
        self.ec2_client = None
        self._zone: Optional[str] = None
        self._lock = threading.RLock()
        self.logger = setup_logger(__name__, "ec2_gateway.log")

    def connect(self) -> "EC2Gateway":
        """Open the session and EC2 client once; later calls are no-ops."""
        with self._lock:
            if self.ec2_client is not None:
                return self
            if self.session is None:
                if self.config is None:
                    raise ConfigurationError("No session or configuration to connect with")
                self.session = SessionManager.from_config(self.config)
            self.ec2_client = self.session.client("ec2", region_name=self.region)
            self.logger.info(f"Connected to EC2 in {self.region}")
        return self

    @property
    def client(self):
        if self.ec2_client is None:
            self.connect()
        return self.ec2_client

    def zone(self) -> str:
        """Return the availability zone, resolving it on first use.

        The first zone in provider order with state ``available`` is chosen.
        """
        if self._zone is not None:
            return self._zone
        with self._lock:
            if self._zone is None:
                response = self._call(
                    "describe_availability_zones",
                    Filters=[{"Name": "state", "Values": ["available"]}],
                )
                zones = response.get("AvailabilityZones", [])
                if not zones:
                    raise NoZoneAvailable(f"No availability zones available in {self.region}")
                self._zone = zones[0]["ZoneName"]
                self.logger.info(f"Using availability zone {self._zone}")
        return self._zone

    def _call(self, operation: str, **params) -> Dict[str, Any]:
        """Invoke an EC2 client operation, converting botocore failures."""
        try:
            return getattr(self.client, operation)(**params)
        except ClientError as e:
            error = e.response.get("Error", {})
            code = error.get("Code", "")
            message = error.get("Message", str(e))
            self.logger.debug(f"EC2 {operation} rejected: {code} - {message}")
            raise ProviderError(
                f"{operation} failed: {code} - {message}", code=code, operation=operation
            ) from e
        except NoCredentialsError as e:
            raise ConfigurationError(f"No AWS credentials available for {operation}") from e
        except BotoCoreError as e:
            self.logger.error(f"EC2 {operation} failed: {e}")
            raise ProviderError(f"{operation} failed: {e}", operation=operation) from e

    # Describe

    def describe_instances(
        self,
        filters: Optional[List[Dict[str, Any]]] = None,
        instance_ids: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Describe EC2 instances with optional filtering."""
        params = {}
        if filters:
            params["Filters"] = filters
        if instance_ids:
            params["InstanceIds"] = instance_ids

        response = self._call("describe_instances", **params)
        instances = []
        for reservation in response.get("Reservations", []):
            for instance in reservation.get("Instances", []):
                instances.append(instance)
        return instances

    def describe_instance_status(self, instance_id: str) -> Optional[str]:
        """Return the state name of one instance, or None if not reported yet."""
        response = self._call(
            "describe_instance_status",
            InstanceIds=[instance_id],
            IncludeAllInstances=True,
        )
        statuses = response.get("InstanceStatuses", [])
        if not statuses:
            return None
        return statuses[0].get("InstanceState", {}).get("Name")

    def describe_volumes(
        self,
        filters: Optional[List[Dict[str, Any]]] = None,
        volume_ids: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Describe EBS volumes."""
        params = {}
        if filters:
            params["Filters"] = filters
        if volume_ids:
            params["VolumeIds"] = volume_ids
        return self._call("describe_volumes", **params).get("Volumes", [])

    def describe_images(
        self,
        image_ids: Optional[List[str]] = None,
        filters: Optional[List[Dict[str, Any]]] = None,
        owners: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Describe AMI images."""
        params = {}
        if image_ids:
            params["ImageIds"] = image_ids
        if filters:
            params["Filters"] = filters
        if owners:
            params["Owners"] = owners
        return self._call("describe_images", **params).get("Images", [])

    def describe_snapshots(self, filters: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        """Describe EBS snapshots owned by this account."""
        params = {"OwnerIds": ["self"]}
        if filters:
            params["Filters"] = filters
        return self._call("describe_snapshots", **params).get("Snapshots", [])

    def describe_network_interfaces(self, interface_ids: List[str]) -> List[Dict[str, Any]]:
        """Describe network interfaces by id."""
        response = self._call("describe_network_interfaces", NetworkInterfaceIds=interface_ids)
        return response.get("NetworkInterfaces", [])

    # Create / tag

    def create_volume(self, snapshot_id: Optional[str] = None, size: Optional[int] = None) -> str:
        """Create a volume in the gateway zone and return its id."""
        params = {"AvailabilityZone": self.zone()}
        if snapshot_id:
            params["SnapshotId"] = snapshot_id
        if size is not None:
            params["Size"] = int(size)
        return self._call("create_volume", **params)["VolumeId"]

    def create_tags(self, resource_id: str, tags: List[Dict[str, str]]) -> None:
        self._call("create_tags", Resources=[resource_id], Tags=tags)

    def run_instance(
        self,
        image_id: str,
        instance_type: str,
        subnet_id: Optional[str] = None,
        user_data: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Run exactly one instance in the gateway zone."""
        params = {
            "ImageId": image_id,
            "MinCount": 1,
            "MaxCount": 1,
            "InstanceType": instance_type,
            "Placement": {"AvailabilityZone": self.zone()},
        }
        if subnet_id:
            params["SubnetId"] = subnet_id
        if user_data is not None:
            # boto3 base64-encodes UserData for run_instances
            params["UserData"] = user_data
        return self._call("run_instances", **params)["Instances"][0]

    def create_network_interface(self, subnet_id: str, description: str = "") -> Dict[str, Any]:
        response = self._call(
            "create_network_interface", SubnetId=subnet_id, Description=description
        )
        return response["NetworkInterface"]

    # Lifecycle

    def terminate_instances(self, instance_ids: List[str]) -> List[Dict[str, Any]]:
        """Terminate instances and return the ones reported as terminating."""
        response = self._call("terminate_instances", InstanceIds=instance_ids)
        return response.get("TerminatingInstances", [])

    def reboot_instances(self, instance_ids: List[str]) -> None:
        self._call("reboot_instances", InstanceIds=instance_ids)

    def delete_volume(self, volume_id: str) -> None:
        self._call("delete_volume", VolumeId=volume_id)

    def attach_volume(self, volume_id: str, instance_id: str, device: str) -> str:
        response = self._call(
            "attach_volume", VolumeId=volume_id, InstanceId=instance_id, Device=device
        )
        return response.get("Device", device)

    def detach_volume(self, volume_id: str, instance_id: str, device: Optional[str] = None) -> str:
        """Force-detach a volume from an instance."""
        params = {"VolumeId": volume_id, "InstanceId": instance_id, "Force": True}
        if device:
            params["Device"] = device
        response = self._call("detach_volume", **params)
        return response.get("Device", device or "")

    def attach_network_interface(self, interface_id: str, instance_id: str, device_index: int) -> str:
        response = self._call(
            "attach_network_interface",
            NetworkInterfaceId=interface_id,
            InstanceId=instance_id,
            DeviceIndex=device_index,
        )
        return response.get("AttachmentId", "")

    def delete_network_interface(self, interface_id: str) -> None:
        self._call("delete_network_interface", NetworkInterfaceId=interface_id)


def create_ec2_gateway(
    config, region: Optional[str] = None, session: Optional[boto3.Session] = None
) -> EC2Gateway:
    """Create and connect an EC2Gateway from a ConfigManager."""
    return EC2Gateway(region=region, session=session, config=config).connect()
