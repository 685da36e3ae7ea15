"""EC2 Bridge - remote lifecycle facade for EC2 instances and EBS volumes."""

__version__ = "1.0.0"
