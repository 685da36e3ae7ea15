#!/usr/bin/env python3
"""
Call bridge exposing the lifecycle orchestrator over XML-RPC.

Only primitives cross this boundary: strings, integers, booleans, lists and
string-keyed dicts. ``None`` results are sent as ``"none"`` and every
orchestrator error becomes an XML-RPC fault of the form
``"<ErrorClass>: <message>"``. Requests are served on worker threads so a
launch waiting for its instance never blocks other callers.
"""

from functools import wraps
from socketserver import ThreadingMixIn
from typing import Any, Callable, Dict, Optional
from xmlrpc.client import Fault
from xmlrpc.server import SimpleXMLRPCRequestHandler, SimpleXMLRPCServer

from ec2_bridge.core.constants import ABSENT
from ec2_bridge.core.orchestrator import LifecycleOrchestrator
from ec2_bridge.utils.exceptions import Ec2BridgeError
from ec2_bridge.utils.logger import setup_logger

logger = setup_logger(__name__, "bridge.log")


class ThreadingXMLRPCServer(ThreadingMixIn, SimpleXMLRPCServer):
    """XML-RPC server handling each request on its own thread."""

    daemon_threads = True
    allow_reuse_address = True


class QuietRequestHandler(SimpleXMLRPCRequestHandler):
    rpc_paths = ("/", "/RPC2")

    def log_message(self, format, *args):
        logger.debug(f"{self.client_address[0]} - {format % args}")


def optional(value: Any) -> Optional[str]:
    """Treat empty strings and the absent sentinel as missing arguments."""
    if value is None or value == "" or value == ABSENT:
        return None
    return value


def to_wire(value: Any) -> Any:
    if value is None:
        return ABSENT
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


def remote(func: Callable, name: Optional[str] = None) -> Callable:
    """Convert results to wire values and errors to faults."""
    name = name or func.__name__

    @wraps(func)
    def wrapper(*args):
        try:
            return to_wire(func(*args))
        except Ec2BridgeError as e:
            logger.error(f"{name} failed: {type(e).__name__}: {e}")
            raise Fault(e.fault_code, f"{type(e).__name__}: {e}") from e
        except Exception as e:
            logger.exception(f"{name} failed unexpectedly")
            raise Fault(1, f"{type(e).__name__}: {e}") from e

    return wrapper


class CallBridge:
    """Registers orchestrator operations under their remote names."""

    def __init__(self, orchestrator: LifecycleOrchestrator, host: str, port: int):
        self.orchestrator = orchestrator
        self.host = host
        self.port = port
        self.server: Optional[ThreadingXMLRPCServer] = None

    def methods(self) -> Dict[str, Callable]:
        """Remote name to callable."""
        orch = self.orchestrator
        resolver = orch.resolver

        def launch(image_id, name, data_subnet="", api_subnet="", user_data=""):
            return orch.launch_instance_from_image(
                image_id,
                name,
                primary_subnet=optional(data_subnet),
                secondary_subnet=optional(api_subnet),
                user_data=optional(user_data),
            )

        def delete_volume(volume_id):
            orch.delete_volume(volume_id)
            return True

        def reboot_instance(instance_id):
            orch.reboot_instance(instance_id)
            return True

        def detach(volume_id, instance_id, device=""):
            return orch.detach_volume_from_instance(volume_id, instance_id, optional(device))

        exposed = {
            "createVolumeFromSnapshot": orch.create_volume_from_snapshot,
            "createVolume": lambda name, size: orch.create_volume(name, int(size)),
            "launchInstanceFromAMI": launch,
            "attachSubNetToInstance": lambda subnet_id, instance_id, device_index, description="": (
                orch.attach_subnet_to_instance(subnet_id, instance_id, int(device_index), description)
            ),
            "deleteInstance": orch.delete_instance,
            "rebootInstance": reboot_instance,
            "deleteVolume": delete_volume,
            "attachVolumeToInstance": orch.attach_volume_to_instance,
            "detachVolumeFromInstance": detach,
            "getInstanceIdFromName": resolver.resolve_instance_id,
            "getVolumeIdFromName": resolver.resolve_volume_id,
            "getImageIdFromName": resolver.resolve_image_id,
            "getInstanceStatus": orch.get_instance_status,
            "get_instance_macs": orch.list_instance_network_macs,
            "cancelLaunch": orch.cancel_launch,
        }
        return {remote_name: remote(func, remote_name) for remote_name, func in exposed.items()}

    def build_server(self) -> ThreadingXMLRPCServer:
        server = ThreadingXMLRPCServer(
            (self.host, self.port),
            requestHandler=QuietRequestHandler,
            allow_none=True,
            logRequests=False,
        )
        for remote_name, handler in self.methods().items():
            server.register_function(handler, remote_name)
        server.register_introspection_functions()
        return server

    def serve_forever(self) -> None:
        self.server = self.build_server()
        logger.info(f"Call bridge listening on {self.host}:{self.port}")
        try:
            self.server.serve_forever()
        finally:
            self.server.server_close()
            logger.info("Call bridge stopped")

    def shutdown(self) -> None:
        if self.server is not None:
            self.server.shutdown()
