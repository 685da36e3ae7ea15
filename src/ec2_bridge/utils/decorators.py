"""Decorators wiring CLI commands to a connected orchestrator."""

import click
from functools import wraps
from typing import Callable

from ec2_bridge.core.aws.ec2 import create_ec2_gateway
from ec2_bridge.core.orchestrator import LifecycleOrchestrator, create_orchestrator
from ec2_bridge.utils.config import ConfigManager
from ec2_bridge.utils.exceptions import Ec2BridgeError
from ec2_bridge.utils.logger import setup_logger


def build_orchestrator(ctx: click.Context) -> LifecycleOrchestrator:
    """Connect a gateway from the command context and wrap it in an orchestrator."""
    config = ctx.obj.get("config") or ConfigManager()
    gateway = create_ec2_gateway(config, region=ctx.obj.get("region"))
    return create_orchestrator(gateway, config)


def handle_operation_error(operation_name: str, error: Exception) -> None:
    """Centralized error handling for operations.

    Args:
        operation_name: Name of the operation that failed
        error: Exception that occurred
    """
    error_msg = f"Error in {operation_name}: {type(error).__name__}: {error}"
    click.echo(error_msg, err=True)

    logger = setup_logger("ec2_bridge.errors", "errors.log")
    logger.error(
        error_msg,
        extra={"operation": operation_name, "error_type": type(error).__name__},
    )


def bridge_operation(func: Callable) -> Callable:
    """Pass a connected orchestrator as the second argument of a command.

    Orchestrator errors are reported on stderr and end the command with
    exit code 1.
    """

    @wraps(func)
    def wrapper(ctx, **kwargs):
        operation_name = func.__name__
        try:
            orchestrator = build_orchestrator(ctx)
            return func(ctx, orchestrator, **kwargs)
        except Ec2BridgeError as e:
            handle_operation_error(operation_name, e)
            ctx.exit(1)

    return wrapper
