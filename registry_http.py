# registry_http.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from errors import RegistryError
from models import Port, RemoteInput, SavePayload
from registry_tags import direction_from_tag, kind_from_tag, kind_to_tag, path_or_none


logger = logging.getLogger(__name__)


class _HttpRegistry:
    label = "registry"

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            r = self._client.request(method, path, **kwargs)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RegistryError(
                f"{self.label} {method} {path} failed: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise RegistryError(f"{self.label} at {self.base_url} unreachable: {e}") from e

        if not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise RegistryError(f"{self.label} {method} {path} returned invalid JSON: {e}") from e

    def _list_field(self, data: Any, key: str) -> List[Any]:
        items = data.get(key) if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise RegistryError(f"{self.label} response has no '{key}' list")
        return items


class HttpPortRegistry(_HttpRegistry):
    label = "Port registry"

    def list_ports(self) -> List[Port]:
        out: List[Port] = []
        for item in self._list_field(self._request("GET", "/ports"), "ports"):
            if not isinstance(item, dict):
                continue
            path = path_or_none(item.get("path"))
            direction = direction_from_tag(item.get("direction"))
            if path is None or direction is None:
                logger.debug("Skipping port entry %r", item)
                continue
            out.append(Port(path=path, direction=direction))
        return out


class HttpAssignmentRegistry(_HttpRegistry):
    label = "Assignment registry"

    def list_inputs(self) -> List[RemoteInput]:
        out: List[RemoteInput] = []
        for item in self._list_field(self._request("GET", "/inputs"), "inputs"):
            if not isinstance(item, dict):
                raise RegistryError(f"{self.label} sent a non-object input entry")
            try:
                input_id = int(item["id"])
            except (KeyError, TypeError, ValueError) as e:
                raise RegistryError(f"{self.label} sent an input without a valid id: {item!r}") from e

            tag = item.get("input_type")
            kind = kind_from_tag(tag)
            if kind is None:
                logger.info("Input %s has unrecognized type %r; leaving it unset.", input_id, tag)

            out.append(
                RemoteInput(
                    id=input_id,
                    name=str(item.get("name") or ""),
                    kind=kind,
                    left_port_path=path_or_none(item.get("left_port_path")),
                    right_port_path=path_or_none(item.get("right_port_path")),
                )
            )
        return out

    def update_assignment(self, input_id: int, payload: SavePayload) -> None:
        body: Dict[str, Any] = {
            "input_type": kind_to_tag(payload.kind),
            "left_port_path": payload.left_port_path,
            "right_port_path": payload.right_port_path,
        }
        self._request("PUT", f"/inputs/{input_id}/assignment", json=body)
