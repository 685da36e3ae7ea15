"""AWS core modules."""

from .ec2 import EC2Gateway, create_ec2_gateway

__all__ = [
    "EC2Gateway",
    "create_ec2_gateway",
]
