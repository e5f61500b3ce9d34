# pw_ports.py
from __future__ import annotations

import json
import subprocess
from typing import Any, Dict, List, Optional

from errors import RegistryError
from models import Port, PortDirection
from registry_tags import direction_from_tag


PW_DUMP = "pw-dump"


def dump_ports_json() -> List[Any]:
    """Raw pw-dump objects; the port registry only reads its Node and Port entries."""
    try:
        p = subprocess.run([PW_DUMP], capture_output=True, text=True)
    except OSError as e:
        raise RegistryError(f"PipeWire port registry: cannot run {PW_DUMP}: {e}") from e

    if p.returncode != 0:
        detail = (p.stderr or p.stdout).strip() or f"exit status {p.returncode}"
        raise RegistryError(f"PipeWire port registry: {PW_DUMP} failed: {detail}")

    try:
        data = json.loads(p.stdout or "[]")
    except ValueError as e:
        raise RegistryError(f"PipeWire port registry: unreadable {PW_DUMP} output: {e}") from e
    if not isinstance(data, list):
        raise RegistryError(f"PipeWire port registry: {PW_DUMP} did not return a list")
    return data


def props_from_obj(obj: Dict[str, Any]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for src in (obj.get("props") or {}, (obj.get("info") or {}).get("props") or {}):
        if not isinstance(src, dict):
            continue
        for k, v in src.items():
            out[str(k)] = "" if v is None else str(v)
    return out


def _port_direction(pr: Dict[str, str], info: Any) -> Optional[PortDirection]:
    d = direction_from_tag(pr.get("port.direction"))
    if d is not None:
        return d
    if isinstance(info, dict):
        return direction_from_tag(info.get("direction"))
    return None


def _objects_of(data: List[Any], suffix: str) -> List[Dict[str, Any]]:
    return [o for o in data if isinstance(o, dict) and str(o.get("type") or "").endswith(suffix)]


def _oid(obj: Dict[str, Any]) -> int:
    try:
        return int(obj.get("id"))
    except (TypeError, ValueError):
        return -1


def ports_from_dump(data: List[Any]) -> List[Port]:
    node_names: Dict[int, str] = {}
    for obj in _objects_of(data, ":Node"):
        node_names[_oid(obj)] = props_from_obj(obj).get("node.name", "")

    ports: List[Port] = []
    for obj in sorted(_objects_of(data, ":Port"), key=_oid):
        pr = props_from_obj(obj)
        try:
            nid = int(pr.get("node.id", "0"))
        except ValueError:
            nid = 0

        nname = node_names.get(nid, "")
        pname = pr.get("port.name", "")
        direction = _port_direction(pr, obj.get("info"))
        if not nname or not pname or direction is None:
            continue
        ports.append(Port(path=f"{nname}:{pname}", direction=direction))

    return ports


class PipeWirePortRegistry:
    """Port registry backed by the local PipeWire graph instead of a remote service."""

    def list_ports(self) -> List[Port]:
        return ports_from_dump(dump_ports_json())

    def close(self) -> None:
        return
