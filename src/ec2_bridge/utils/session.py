#!/usr/bin/env python3
"""
utils/session.py

Session management utilities for AWS interactions.

Provides functions and classes to handle AWS session creation and role assumption.
Credentials always come from the boto3 credential chain (profile, environment,
instance metadata); nothing is read from the settings file.
"""

import boto3
from typing import Optional
from botocore.exceptions import BotoCoreError, ClientError
from .exceptions import ConfigurationError, ValidationRules
from .logger import setup_logger

logger = setup_logger(__name__, "session.log")


def assume_role(
    base_session: boto3.Session,
    account_id: str,
    role: str,
    region: str,
    role_session_name: str = "ec2-bridge",
) -> boto3.Session:
    """Assumes a specified role in an AWS account and returns a boto3 Session."""
    if not ValidationRules.validate_aws_account_id(account_id):
        raise ConfigurationError(f"Invalid AWS account ID: {account_id}. Must be 12 digits.")

    role_arn = f"arn:aws:iam::{account_id}:role/{role}"

    try:
        sts_client = base_session.client("sts", region_name=region)
        response = sts_client.assume_role(
            RoleArn=role_arn, RoleSessionName=role_session_name
        )
        credentials = response["Credentials"]
    except ClientError as e:
        error_code = e.response["Error"]["Code"]
        raise ConfigurationError(f"Failed to assume role {role_arn}: {error_code} - {e}") from e
    except BotoCoreError as e:
        raise ConfigurationError(f"Unexpected error assuming role {role_arn}: {e}") from e

    logger.info(f"Assumed role {role_arn} as {role_session_name}")
    return boto3.Session(
        aws_access_key_id=credentials["AccessKeyId"],
        aws_secret_access_key=credentials["SecretAccessKey"],
        aws_session_token=credentials["SessionToken"],
        region_name=region,
    )


class SessionManager:
    """Manages AWS sessions for role assumption and credential handling."""

    @classmethod
    def get_session(
        cls,
        region: str,
        profile: Optional[str] = None,
        account_id: str = "",
        role: str = "",
        role_session_name: str = "ec2-bridge",
    ) -> boto3.Session:
        """Create a boto3 Session, assuming ``role`` when one is configured.

        Raises:
            ConfigurationError: no usable credentials were found.
        """
        try:
            session = boto3.Session(profile_name=profile, region_name=region)
        except BotoCoreError as e:
            raise ConfigurationError(
                f"Cannot load credentials for profile '{profile}': {e}"
            ) from e

        if session.get_credentials() is None:
            raise ConfigurationError(
                "Cannot load AWS credentials. Configure a profile in ~/.aws/credentials, "
                "set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY, or run with an instance role."
            )

        if role:
            return assume_role(session, account_id, role, region, role_session_name)
        return session

    @classmethod
    def from_config(cls, config) -> boto3.Session:
        """Create a boto3 Session from a ConfigManager."""
        role = config.get_assume_role()
        return cls.get_session(
            region=config.get_aws_region(),
            profile=config.get_aws_profile(),
            account_id=role["account_id"],
            role=role["role"],
            role_session_name=role["session_name"],
        )
