"""Tests for Name tag and snapshot resolution."""

import pytest

from ec2_bridge.core.constants import LIVE_INSTANCE_STATES
from ec2_bridge.core.resolver import ResourceResolver
from ec2_bridge.utils.exceptions import AmbiguousResource, AmbiguousSnapshot, ProviderError

from conftest import reservations


@pytest.fixture
def resolver(gateway):
    return ResourceResolver(gateway)


class TestInstanceResolution:
    def test_not_found_returns_none(self, resolver, ec2_client):
        ec2_client.describe_instances.return_value = reservations()
        assert resolver.resolve_instance_id("web-1") is None

    def test_single_match(self, resolver, ec2_client):
        ec2_client.describe_instances.return_value = reservations({"InstanceId": "i-1"})
        assert resolver.resolve_instance_id("web-1") == "i-1"

    def test_several_matches_are_ambiguous(self, resolver, ec2_client):
        ec2_client.describe_instances.return_value = reservations(
            {"InstanceId": "i-1"}, {"InstanceId": "i-2"}
        )
        with pytest.raises(AmbiguousResource) as exc_info:
            resolver.resolve_instance_id("web-1")
        assert exc_info.value.candidates == ["i-1", "i-2"]

    def test_only_live_instances_are_considered(self, resolver, ec2_client):
        ec2_client.describe_instances.return_value = reservations()
        resolver.resolve_instance_id("web-1")
        filters = ec2_client.describe_instances.call_args.kwargs["Filters"]
        assert {"Name": "tag:Name", "Values": ["web-1"]} in filters
        assert {"Name": "instance-state-name", "Values": LIVE_INSTANCE_STATES} in filters
        assert "terminated" not in LIVE_INSTANCE_STATES

    def test_provider_errors_are_not_hidden(self, resolver, ec2_client, client_error):
        ec2_client.describe_instances.side_effect = client_error("UnauthorizedOperation")
        with pytest.raises(ProviderError):
            resolver.resolve_instance_id("web-1")


class TestVolumeResolution:
    def test_not_found_returns_none(self, resolver, ec2_client):
        ec2_client.describe_volumes.return_value = {"Volumes": []}
        assert resolver.resolve_volume_id("data-1") is None

    def test_single_match(self, resolver, ec2_client):
        ec2_client.describe_volumes.return_value = {"Volumes": [{"VolumeId": "vol-1"}]}
        assert resolver.resolve_volume_id("data-1") == "vol-1"
        ec2_client.describe_volumes.assert_called_once_with(
            Filters=[{"Name": "tag:Name", "Values": ["data-1"]}]
        )

    def test_several_matches_are_ambiguous(self, resolver, ec2_client):
        ec2_client.describe_volumes.return_value = {
            "Volumes": [{"VolumeId": "vol-1"}, {"VolumeId": "vol-2"}]
        }
        with pytest.raises(AmbiguousResource):
            resolver.resolve_volume_id("data-1")


class TestImageResolution:
    def test_not_found_returns_none(self, resolver, ec2_client):
        ec2_client.describe_images.return_value = {"Images": []}
        assert resolver.resolve_image_id("base") is None

    def test_single_match_in_own_images(self, resolver, ec2_client):
        ec2_client.describe_images.return_value = {"Images": [{"ImageId": "ami-1"}]}
        assert resolver.resolve_image_id("base") == "ami-1"
        assert ec2_client.describe_images.call_args.kwargs["Owners"] == ["self"]

    def test_several_matches_are_ambiguous(self, resolver, ec2_client):
        ec2_client.describe_images.return_value = {
            "Images": [{"ImageId": "ami-1"}, {"ImageId": "ami-2"}]
        }
        with pytest.raises(AmbiguousResource):
            resolver.resolve_image_id("base")


class TestSnapshotResolution:
    EXTERNAL_ID = "d06e5c1a-169f-4c88-af96-4f4c139b37de"

    def _snapshot(self, snapshot_id, description):
        return {"SnapshotId": snapshot_id, "Description": description, "State": "completed"}

    def test_exactly_one_match(self, resolver, ec2_client):
        ec2_client.describe_snapshots.return_value = {
            "Snapshots": [self._snapshot("snap-1", f"backup of {self.EXTERNAL_ID}")]
        }
        assert resolver.resolve_snapshot_id(self.EXTERNAL_ID) == "snap-1"
        ec2_client.describe_snapshots.assert_called_once_with(
            OwnerIds=["self"],
            Filters=[{"Name": "description", "Values": [f"*{self.EXTERNAL_ID}*"]}],
        )

    def test_zero_matches(self, resolver, ec2_client):
        ec2_client.describe_snapshots.return_value = {"Snapshots": []}
        with pytest.raises(AmbiguousSnapshot) as exc_info:
            resolver.resolve_snapshot_id(self.EXTERNAL_ID)
        assert exc_info.value.candidates == []

    def test_two_matches(self, resolver, ec2_client):
        ec2_client.describe_snapshots.return_value = {
            "Snapshots": [
                self._snapshot("snap-1", f"{self.EXTERNAL_ID} first"),
                self._snapshot("snap-2", f"{self.EXTERNAL_ID} second"),
            ]
        }
        with pytest.raises(AmbiguousSnapshot) as exc_info:
            resolver.resolve_snapshot_id(self.EXTERNAL_ID)
        assert exc_info.value.candidates == ["snap-1", "snap-2"]

    def test_descriptions_without_the_id_are_ignored(self, resolver, ec2_client):
        ec2_client.describe_snapshots.return_value = {
            "Snapshots": [
                self._snapshot("snap-1", f"copy of {self.EXTERNAL_ID}"),
                self._snapshot("snap-2", "unrelated"),
            ]
        }
        assert resolver.resolve_snapshot_id(self.EXTERNAL_ID) == "snap-1"

    def test_empty_external_id(self, resolver, ec2_client):
        with pytest.raises(AmbiguousSnapshot):
            resolver.resolve_snapshot_id("")
        ec2_client.describe_snapshots.assert_not_called()
