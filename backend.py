# backend.py
from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Union

from models import Port, RemoteInput, SavePayload
from pw_ports import PipeWirePortRegistry
from registry_http import HttpAssignmentRegistry, HttpPortRegistry
from store_config import RegistryConfig


logger = logging.getLogger(__name__)

PIPEWIRE_SCHEME = "pipewire:"


class PortRegistry(Protocol):
    def list_ports(self) -> List[Port]: ...

    def close(self) -> None: ...


class AssignmentRegistry(Protocol):
    def list_inputs(self) -> List[RemoteInput]: ...

    def update_assignment(self, input_id: int, payload: SavePayload) -> None: ...

    def close(self) -> None: ...


def make_port_registry(
    url: str, timeout: Optional[float] = None
) -> Union[PipeWirePortRegistry, HttpPortRegistry]:
    if url.strip().lower().startswith(PIPEWIRE_SCHEME):
        return PipeWirePortRegistry()
    return HttpPortRegistry(url, timeout=timeout)


class RegistryBackend:
    """The two registries the controller talks to. Calls block; run them off the UI thread."""

    def __init__(self, ports: PortRegistry, assignments: AssignmentRegistry) -> None:
        self._ports = ports
        self._assignments = assignments

    @classmethod
    def from_config(cls, config: RegistryConfig) -> "RegistryBackend":
        return cls(
            ports=make_port_registry(config.port_registry_url, config.request_timeout),
            assignments=HttpAssignmentRegistry(config.assignment_registry_url, timeout=config.request_timeout),
        )

    def list_ports(self) -> List[Port]:
        return list(self._ports.list_ports())

    def list_inputs(self) -> List[RemoteInput]:
        return list(self._assignments.list_inputs())

    def update_assignment(self, input_id: int, payload: SavePayload) -> None:
        self._assignments.update_assignment(input_id, payload)

    def close(self) -> None:
        for client in (self._ports, self._assignments):
            try:
                client.close()
            except Exception as e:
                logger.warning("Closing %s failed: %s", type(client).__name__, e)
