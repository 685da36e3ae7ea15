#!/usr/bin/env python3
"""
Resource resolution by Name tag and by external snapshot id.

The Name tag is the only link between the external orchestrator's names and
provider ids. The provider does not enforce uniqueness, so every name-tag
lookup follows the same policy:

- no match: ``None`` (absent, not an error)
- one match: its id
- several matches: ``AmbiguousResource``

Snapshot mapping is stricter: exactly one snapshot whose description
contains the external id, otherwise ``AmbiguousSnapshot``.
"""

from typing import Dict, List, Any, Optional

from ec2_bridge.core.aws.ec2 import EC2Gateway
from ec2_bridge.core.constants import LIVE_INSTANCE_STATES, NAME_TAG_KEY
from ec2_bridge.core.models import SnapshotInfo
from ec2_bridge.utils.exceptions import AmbiguousResource, AmbiguousSnapshot
from ec2_bridge.utils.logger import setup_logger

logger = setup_logger(__name__, "resolver.log")


def name_filter(name: str) -> Dict[str, Any]:
    """Build an exact ``tag:Name`` filter."""
    return {"Name": f"tag:{NAME_TAG_KEY}", "Values": [name]}


class ResourceResolver:
    """Maps names and external ids to provider ids through the gateway."""

    def __init__(self, gateway: EC2Gateway):
        self.gateway = gateway

    def _unique(self, resource_type: str, name: str, ids: List[str]) -> Optional[str]:
        if not ids:
            logger.debug(f"No {resource_type} tagged Name={name}")
            return None
        if len(ids) > 1:
            logger.warning(f"Name={name} is carried by {len(ids)} {resource_type}s: {ids}")
            raise AmbiguousResource(resource_type, name, ids)
        return ids[0]

    def resolve_instance_id(self, name: str) -> Optional[str]:
        """Return the id of the live instance tagged ``name``."""
        instances = self.gateway.describe_instances(
            filters=[
                name_filter(name),
                {"Name": "instance-state-name", "Values": LIVE_INSTANCE_STATES},
            ]
        )
        return self._unique("instance", name, [i["InstanceId"] for i in instances])

    def resolve_volume_id(self, name: str) -> Optional[str]:
        """Return the id of the volume tagged ``name``."""
        volumes = self.gateway.describe_volumes(filters=[name_filter(name)])
        return self._unique("volume", name, [v["VolumeId"] for v in volumes])

    def resolve_image_id(self, name: str) -> Optional[str]:
        """Return the id of the image tagged ``name`` among the account's own images."""
        images = self.gateway.describe_images(filters=[name_filter(name)], owners=["self"])
        return self._unique("image", name, [i["ImageId"] for i in images])

    def resolve_snapshot_id(self, external_id: str) -> str:
        """Map an external snapshot id to the one snapshot describing it.

        Raises:
            AmbiguousSnapshot: zero or several snapshots match.
        """
        if not external_id:
            raise AmbiguousSnapshot(external_id, [])

        snapshots = self.gateway.describe_snapshots(
            filters=[{"Name": "description", "Values": [f"*{external_id}*"]}]
        )
        candidates = [
            snap.snapshot_id
            for snap in map(SnapshotInfo.from_aws_snapshot, snapshots)
            if snap.matches_external_id(external_id)
        ]
        logger.info(f"Snapshot candidates for {external_id}: {candidates}")

        if len(candidates) != 1:
            raise AmbiguousSnapshot(external_id, candidates)
        return candidates[0]
