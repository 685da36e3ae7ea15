#!/usr/bin/env python3
"""Core constants for the EC2 bridge."""

# AWS Service Constants
DEFAULT_AWS_REGION = "ap-southeast-1"
NAME_TAG_KEY = "Name"

# Instance type per image virtualization type
HVM_INSTANCE_TYPE = "t2.micro"
PARAVIRTUAL_INSTANCE_TYPE = "t1.micro"

# Instance states a Name tag lookup still considers live
LIVE_INSTANCE_STATES = ["pending", "running", "rebooting", "stopping", "stopped"]

# Lifecycle timing (seconds)
DEFAULT_POLL_INTERVAL = 10
DEFAULT_LAUNCH_TIMEOUT = 180
DEFAULT_SETTLE_SECONDS = 20

# Secondary network interface
SECONDARY_DEVICE_INDEX = 1
DEFAULT_SECONDARY_INTERFACE_DESCRIPTION = "api-network"

# Call bridge
DEFAULT_BRIDGE_HOST = "127.0.0.1"
DEFAULT_BRIDGE_PORT = 25535
ABSENT = "none"

# Provider error codes handled explicitly
INSTANCE_NOT_FOUND_CODES = ("InvalidInstanceID.NotFound", "InvalidInstanceID.Malformed")
INTERFACE_NOT_FOUND_CODE = "InvalidNetworkInterfaceID.NotFound"
ALREADY_DETACHED_CODES = ("IncorrectState", "InvalidAttachment.NotFound")
VOLUME_NOT_FOUND_CODE = "InvalidVolume.NotFound"
