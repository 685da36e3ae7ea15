#!/usr/bin/env python3
"""
Instance and volume lifecycle orchestration.

Every operation goes through one EC2Gateway and blocks until its provider
side effect is observable: launches poll until the instance is running,
deletes wait for termination to settle before cleaning up interfaces.
Nothing is rolled back; partial failures are raised or reported so the
caller can reconcile.
"""

import threading
from dataclasses import dataclass
from typing import Dict, Optional

from ec2_bridge.core.aws.ec2 import EC2Gateway
from ec2_bridge.core.concurrency import CancellationToken, ResourceLocks, wait_for
from ec2_bridge.core.constants import (
    ABSENT,
    ALREADY_DETACHED_CODES,
    DEFAULT_LAUNCH_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SECONDARY_INTERFACE_DESCRIPTION,
    DEFAULT_SETTLE_SECONDS,
    HVM_INSTANCE_TYPE,
    INSTANCE_NOT_FOUND_CODES,
    INTERFACE_NOT_FOUND_CODE,
    PARAVIRTUAL_INSTANCE_TYPE,
    SECONDARY_DEVICE_INDEX,
    VOLUME_NOT_FOUND_CODE,
)
from ec2_bridge.core.models import (
    CleanupReport,
    ImageInfo,
    InstanceInfo,
    InstanceState,
    LaunchResult,
    NetworkInterfaceInfo,
    TagInfo,
    VolumeInfo,
)
from ec2_bridge.core.resolver import ResourceResolver
from ec2_bridge.utils.exceptions import (
    LaunchTimeout,
    OperationCancelled,
    ProviderError,
    TerminateRejected,
)
from ec2_bridge.utils.logger import setup_logger

logger = setup_logger(__name__, "orchestrator.log")

TERMINAL_LAUNCH_STATES = (
    InstanceState.RUNNING.value,
    InstanceState.SHUTTING_DOWN.value,
    InstanceState.TERMINATED.value,
)


@dataclass
class LifecycleSettings:
    """Timing and naming used by the orchestrator."""
    poll_interval: float = DEFAULT_POLL_INTERVAL
    launch_timeout: float = DEFAULT_LAUNCH_TIMEOUT
    settle_seconds: float = DEFAULT_SETTLE_SECONDS
    secondary_interface_description: str = DEFAULT_SECONDARY_INTERFACE_DESCRIPTION

    @classmethod
    def from_config(cls, config) -> "LifecycleSettings":
        """Build settings from a ConfigManager."""
        launch = config.get_launch_config()
        teardown = config.get_teardown_config()
        return cls(
            poll_interval=launch["poll_interval"],
            launch_timeout=launch["timeout"],
            settle_seconds=teardown["settle_seconds"],
            secondary_interface_description=launch["secondary_interface_description"],
        )


def select_instance_type(image: ImageInfo) -> str:
    """Hardware-virtual images get the larger tier, paravirtual the smallest."""
    return HVM_INSTANCE_TYPE if image.is_hvm else PARAVIRTUAL_INSTANCE_TYPE


class LifecycleOrchestrator:
    """Creates, launches, attaches and tears down EC2 resources."""

    def __init__(
        self,
        gateway: EC2Gateway,
        resolver: Optional[ResourceResolver] = None,
        settings: Optional[LifecycleSettings] = None,
        locks: Optional[ResourceLocks] = None,
    ):
        self.gateway = gateway
        self.resolver = resolver or ResourceResolver(gateway)
        self.settings = settings or LifecycleSettings()
        self.locks = locks or ResourceLocks()
        self._launches: Dict[str, CancellationToken] = {}
        self._launches_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _tag_name(self, resource_id: str, name: str) -> bool:
        """Write the Name tag. Failure leaves an untagged resource behind."""
        try:
            self.gateway.create_tags(resource_id, TagInfo(name=name).to_aws_tags())
            return True
        except ProviderError as e:
            logger.warning(f"Failed to tag {resource_id} with Name={name}, resource is untagged: {e}")
            return False

    def describe_instance(self, instance_id: str) -> Optional[InstanceInfo]:
        """Describe one instance, or None when the provider does not know it."""
        try:
            instances = self.gateway.describe_instances(instance_ids=[instance_id])
        except ProviderError as e:
            if e.code in INSTANCE_NOT_FOUND_CODES:
                return None
            raise
        if not instances:
            return None
        return InstanceInfo.from_aws_instance(instances[0])

    def describe_volume(self, volume_id: str) -> Optional[VolumeInfo]:
        """Describe one volume, or None when the provider does not know it."""
        try:
            volumes = self.gateway.describe_volumes(volume_ids=[volume_id])
        except ProviderError as e:
            if e.code == VOLUME_NOT_FOUND_CODE:
                return None
            raise
        return VolumeInfo.from_aws_volume(volumes[0]) if volumes else None

    # ------------------------------------------------------------------
    # Volumes
    # ------------------------------------------------------------------

    def create_volume_from_snapshot(self, external_snapshot_id: str, name: str) -> str:
        """Create a volume from the snapshot mapped to ``external_snapshot_id``."""
        snapshot_id = self.resolver.resolve_snapshot_id(external_snapshot_id)
        with self.locks.hold(f"volume-name:{name}"):
            volume_id = self.gateway.create_volume(snapshot_id=snapshot_id)
            logger.info(f"Created volume {volume_id} from {snapshot_id} ({external_snapshot_id})")
            self._tag_name(volume_id, name)
        return volume_id

    def create_volume(self, name: str, size: int) -> str:
        """Create a blank volume of ``size`` GiB tagged ``name``."""
        with self.locks.hold(f"volume-name:{name}"):
            volume_id = self.gateway.create_volume(size=size)
            logger.info(f"Created blank volume {volume_id} ({size} GiB)")
            self._tag_name(volume_id, name)
        return volume_id

    def delete_volume(self, volume_id: str) -> None:
        with self.locks.hold(volume_id):
            self.gateway.delete_volume(volume_id)
            logger.info(f"Deleted volume {volume_id}")

    def attach_volume_to_instance(self, volume_id: str, instance_id: str, device: str) -> str:
        with self.locks.hold(volume_id, instance_id):
            attached = self.gateway.attach_volume(volume_id, instance_id, device)
            logger.info(f"Attached {volume_id} to {instance_id} at {attached}")
            return attached

    def detach_volume_from_instance(
        self, volume_id: str, instance_id: str, device: Optional[str] = None
    ) -> Optional[str]:
        """Force-detach a volume. An already detached volume is a no-op (None)."""
        with self.locks.hold(volume_id, instance_id):
            volume = self.describe_volume(volume_id)
            if volume is not None and volume.attachment_for(instance_id) is None:
                logger.info(f"Volume {volume_id} ({volume.state}) is not attached to {instance_id}")
                return None
            try:
                detached = self.gateway.detach_volume(volume_id, instance_id, device)
            except ProviderError as e:
                if e.code in ALREADY_DETACHED_CODES:
                    logger.info(f"Volume {volume_id} is not attached to {instance_id}: {e.code}")
                    return None
                raise
            logger.info(f"Force-detached {volume_id} from {instance_id}")
            return detached

    # ------------------------------------------------------------------
    # Instances
    # ------------------------------------------------------------------

    def _register_launch(self, name: str, token: CancellationToken) -> None:
        with self._launches_guard:
            self._launches[name] = token

    def _unregister_launch(self, name: str, token: CancellationToken) -> None:
        with self._launches_guard:
            if self._launches.get(name) is token:
                del self._launches[name]

    def cancel_launch(self, name: str) -> bool:
        """Abandon the in-flight launch for ``name``. The instance is kept."""
        with self._launches_guard:
            token = self._launches.get(name)
        if token is None:
            return False
        token.cancel()
        logger.info(f"Cancellation requested for launch of {name}")
        return True

    def _wait_until_running(self, instance_id: str, token: CancellationToken) -> str:
        def probe() -> Optional[str]:
            try:
                return self.gateway.describe_instance_status(instance_id)
            except ProviderError as e:
                # Freshly run instances may not be visible yet
                if e.code in INSTANCE_NOT_FOUND_CODES:
                    return None
                raise

        try:
            state = wait_for(
                probe,
                lambda s: s in TERMINAL_LAUNCH_STATES,
                interval=self.settings.poll_interval,
                timeout=self.settings.launch_timeout,
                token=token,
                what=f"launch of {instance_id}",
            )
        except TimeoutError as e:
            last_state = e.args[0] if e.args else None
            logger.error(
                f"{instance_id} not running after {self.settings.launch_timeout}s "
                f"(last state: {last_state}); instance left in provider"
            )
            raise LaunchTimeout(instance_id, self.settings.launch_timeout, last_state) from None
        except OperationCancelled:
            logger.warning(f"Launch wait for {instance_id} cancelled; instance left in provider")
            raise

        if state != InstanceState.RUNNING.value:
            raise ProviderError(
                f"{instance_id} entered {state} while launching",
                code="InstanceTerminated",
                operation="run_instances",
            )
        return state

    def launch_instance_from_image(
        self,
        image_id: str,
        name: str,
        primary_subnet: Optional[str] = None,
        secondary_subnet: Optional[str] = None,
        user_data: Optional[str] = None,
        cancel: Optional[CancellationToken] = None,
    ) -> LaunchResult:
        """Launch one instance from ``image_id`` and block until it is running.

        Args:
            image_id: AMI to boot
            name: Name tag for the instance
            primary_subnet: Subnet for the primary interface
            secondary_subnet: Subnet for an extra interface at device index 1
            user_data: Plain-text user data
            cancel: Token to abandon the running-state wait

        Raises:
            LaunchTimeout: not running within the launch budget
            OperationCancelled: the wait was cancelled
            ProviderError: the provider rejected a step
        """
        token = cancel or CancellationToken()
        with self.locks.hold(f"instance-name:{name}"):
            self._register_launch(name, token)
            try:
                return self._launch(image_id, name, primary_subnet, secondary_subnet, user_data, token)
            finally:
                self._unregister_launch(name, token)

    def _launch(self, image_id, name, primary_subnet, secondary_subnet, user_data, token) -> LaunchResult:
        images = self.gateway.describe_images(image_ids=[image_id])
        if not images:
            raise ProviderError(
                f"Image {image_id} not found", code="InvalidAMIID.NotFound", operation="describe_images"
            )
        image = ImageInfo.from_aws_image(images[0])
        instance_type = select_instance_type(image)

        instance = self.gateway.run_instance(
            image_id, instance_type, subnet_id=primary_subnet, user_data=user_data
        )
        instance_id = instance["InstanceId"]
        logger.info(
            f"Launched {instance_id} ({instance_type}, {image.virtualization_type}) "
            f"from {image_id} as {name}"
        )
        self._tag_name(instance_id, name)

        self._wait_until_running(instance_id, token)
        described = self.describe_instance(instance_id)
        public_ip = described.public_ip if described else None
        logger.info(f"{instance_id} is running at {public_ip}")

        secondary_interface_id = None
        if secondary_subnet:
            secondary_interface_id = self.attach_subnet_to_instance(
                secondary_subnet,
                instance_id,
                SECONDARY_DEVICE_INDEX,
                self.settings.secondary_interface_description,
            )

        return LaunchResult(
            instance_id=instance_id,
            public_ip=public_ip,
            instance_type=instance_type,
            secondary_interface_id=secondary_interface_id,
        )

    def attach_subnet_to_instance(
        self, subnet_id: str, instance_id: str, device_index: int, description: str = ""
    ) -> str:
        """Create an interface in ``subnet_id`` and attach it at ``device_index``."""
        with self.locks.hold(instance_id):
            eni = NetworkInterfaceInfo.from_aws_interface(
                self.gateway.create_network_interface(subnet_id, description)
            )
            self.gateway.attach_network_interface(eni.interface_id, instance_id, device_index)
            logger.info(
                f"Attached {eni.interface_id} ({subnet_id}) to {instance_id} at index {device_index}"
            )
            return eni.interface_id

    def delete_instance(
        self, instance_id: str, cancel: Optional[CancellationToken] = None
    ) -> CleanupReport:
        """Terminate an instance, then delete the interfaces it had.

        Interface ids are recorded before terminating. Each deletion is
        attempted independently and its outcome recorded in the report.

        Raises:
            TerminateRejected: no instance began terminating
        """
        token = cancel or CancellationToken()
        with self.locks.hold(instance_id):
            instance = self.describe_instance(instance_id)
            interface_ids = instance.interface_ids if instance else []

            terminating = self.gateway.terminate_instances([instance_id])
            if not terminating:
                raise TerminateRejected(
                    f"Failed to delete {instance_id}: nothing is terminating",
                    operation="terminate_instances",
                )
            logger.info(f"Terminating {instance_id}; interfaces to clean up: {interface_ids}")

            if token.wait(self.settings.settle_seconds):
                raise OperationCancelled(f"Cleanup for {instance_id} cancelled")

            report = CleanupReport(instance_id=instance_id)
            for interface_id in interface_ids:
                try:
                    self.gateway.delete_network_interface(interface_id)
                    report.deleted.append(interface_id)
                    logger.info(f"Deleted interface {interface_id}")
                except ProviderError as e:
                    if e.code == INTERFACE_NOT_FOUND_CODE:
                        report.already_gone.append(interface_id)
                        logger.info(f"Interface {interface_id} already deleted")
                    else:
                        report.failed[interface_id] = str(e)
                        logger.error(f"Failed to delete interface {interface_id}, may be leaked: {e}")
            return report

    def reboot_instance(self, instance_id: str) -> None:
        """Request a reboot without waiting for it."""
        with self.locks.hold(instance_id):
            self.gateway.reboot_instances([instance_id])
            logger.info(f"Reboot requested for {instance_id}")

    def get_instance_status(self, instance_id: str) -> str:
        """Return the state name, or ``"none"`` when the instance is unknown."""
        instance = self.describe_instance(instance_id)
        return instance.state if instance else ABSENT

    def list_instance_network_macs(self, instance_id: str) -> Dict[str, str]:
        """Map subnet id to MAC address for every interface of an instance."""
        instance = self.describe_instance(instance_id)
        if instance is None or not instance.interface_ids:
            return {}
        macs = {}
        for eni in self.gateway.describe_network_interfaces(instance.interface_ids):
            info = NetworkInterfaceInfo.from_aws_interface(eni)
            macs[info.subnet_id] = info.mac_address
        return macs


def create_orchestrator(gateway: EC2Gateway, config=None) -> LifecycleOrchestrator:
    """Create a LifecycleOrchestrator with settings from ``config``."""
    settings = LifecycleSettings.from_config(config) if config else LifecycleSettings()
    return LifecycleOrchestrator(gateway, settings=settings)
