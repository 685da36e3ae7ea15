#!/usr/bin/env python3
"""
EC2 Bridge - CLI
Starts the call bridge and offers a few direct lifecycle lookups
"""

import json
from pathlib import Path

import click

from ec2_bridge import __version__
from ec2_bridge.bridge import CallBridge
from ec2_bridge.utils.config import ConfigManager
from ec2_bridge.utils.decorators import bridge_operation
from ec2_bridge.utils.exceptions import CLIError, ValidationRules
from ec2_bridge.utils.logger import set_log_level, setup_logger


def setup_logging(config: ConfigManager, verbose: bool = False):
    level = "DEBUG" if verbose else config.get_logging_level()
    logger = setup_logger("ec2_bridge.cli", "cli.log", level)
    set_log_level(level)
    return logger


@click.group()
@click.option("--region", default=None, help="AWS region (overrides settings)")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding settings.yaml",
)
@click.pass_context
def cli(ctx, region, config_dir):
    """EC2 Bridge - remote lifecycle facade for EC2 instances and volumes"""
    ctx.ensure_object(dict)
    ctx.obj["region"] = region
    ctx.obj["config"] = ConfigManager(config_dir)


@cli.command()
@click.option("--host", default=None, help="Address to bind (default from settings)")
@click.option("--port", type=int, default=None, help="Port to listen on (default 25535)")
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
@bridge_operation
def serve(ctx, orchestrator, host, port, verbose):
    """Start the XML-RPC call bridge"""
    config = ctx.obj["config"]
    logger = setup_logging(config, verbose)

    # Fail at startup rather than on the first call
    zone = orchestrator.gateway.zone()
    bridge = CallBridge(
        orchestrator,
        host or config.get_bridge_host(),
        port or config.get_bridge_port(),
    )
    logger.info(f"Serving {orchestrator.gateway.region}/{zone} on {bridge.host}:{bridge.port}")
    try:
        bridge.serve_forever()
    except KeyboardInterrupt:
        click.echo("Shutting down")


@cli.command()
@click.argument("instance_id")
@click.pass_context
@bridge_operation
def status(ctx, orchestrator, instance_id):
    """Show the state of an instance ("none" if unknown)"""
    if not ValidationRules.validate_resource_id("instance", instance_id):
        raise CLIError(f"Not an instance id: {instance_id}")
    click.echo(orchestrator.get_instance_status(instance_id))


@cli.command()
@click.argument("kind", type=click.Choice(["instance", "volume", "image", "snapshot"]))
@click.argument("name")
@click.pass_context
@bridge_operation
def resolve(ctx, orchestrator, kind, name):
    """Resolve a Name tag (or external snapshot id) to a provider id"""
    resolver = orchestrator.resolver
    lookups = {
        "instance": resolver.resolve_instance_id,
        "volume": resolver.resolve_volume_id,
        "image": resolver.resolve_image_id,
        "snapshot": resolver.resolve_snapshot_id,
    }
    click.echo(lookups[kind](name) or "none")


@cli.command()
@click.argument("instance_id")
@click.pass_context
@bridge_operation
def macs(ctx, orchestrator, instance_id):
    """List subnet to MAC address mappings of an instance"""
    click.echo(json.dumps(orchestrator.list_instance_network_macs(instance_id), indent=2))


@cli.command()
def version():
    """Show version information"""
    click.echo(f"EC2 Bridge {__version__}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
