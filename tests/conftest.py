"""Shared fixtures: a mocked boto3 session/EC2 client and zero-wait settings."""

import os
import tempfile

os.environ.setdefault("EC2_BRIDGE_LOG_DIR", tempfile.mkdtemp(prefix="ec2-bridge-logs-"))

from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from ec2_bridge.core.aws.ec2 import EC2Gateway
from ec2_bridge.core.orchestrator import LifecycleOrchestrator, LifecycleSettings

REGION = "ap-southeast-1"
ZONE = "ap-southeast-1a"
INSTANCE_ID = "i-0123456789abcdef0"
VOLUME_ID = "vol-0123456789abcdef0"


def make_client_error(code: str, operation: str = "Operation", message: str = "") -> ClientError:
    return ClientError(
        {"Error": {"Code": code, "Message": message or f"{code} raised"}},
        operation,
    )


def reservations(*instances: Dict[str, Any]) -> Dict[str, Any]:
    return {"Reservations": [{"Instances": list(instances)}] if instances else []}


def instance_data(
    instance_id: str = INSTANCE_ID,
    state: str = "running",
    public_ip: Optional[str] = "54.10.20.30",
    interfaces: Optional[List[Dict[str, Any]]] = None,
    name: str = "web-1",
) -> Dict[str, Any]:
    data = {
        "InstanceId": instance_id,
        "InstanceType": "t2.micro",
        "State": {"Name": state},
        "Placement": {"AvailabilityZone": ZONE},
        "PrivateIpAddress": "10.0.0.10",
        "NetworkInterfaces": interfaces or [],
        "Tags": [{"Key": "Name", "Value": name}],
    }
    if public_ip:
        data["PublicIpAddress"] = public_ip
    return data


def status_response(state: Optional[str]) -> Dict[str, Any]:
    if state is None:
        return {"InstanceStatuses": []}
    return {"InstanceStatuses": [{"InstanceId": INSTANCE_ID, "InstanceState": {"Name": state}}]}


@pytest.fixture
def client_error():
    return make_client_error


@pytest.fixture
def ec2_client():
    client = MagicMock(name="ec2_client")
    client.describe_volumes.return_value = {"Volumes": []}
    client.describe_availability_zones.return_value = {
        "AvailabilityZones": [
            {"ZoneName": ZONE, "State": "available"},
            {"ZoneName": "ap-southeast-1b", "State": "available"},
        ]
    }
    return client


@pytest.fixture
def boto_session(ec2_client):
    session = MagicMock(name="boto3_session")
    session.client.return_value = ec2_client
    return session


@pytest.fixture
def gateway(boto_session):
    return EC2Gateway(region=REGION, session=boto_session)


@pytest.fixture
def settings():
    return LifecycleSettings(poll_interval=0, launch_timeout=5, settle_seconds=0)


@pytest.fixture
def orchestrator(gateway, settings):
    return LifecycleOrchestrator(gateway, settings=settings)
