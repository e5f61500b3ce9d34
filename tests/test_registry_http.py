"""Tests for registry_http.py against httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from errors import RegistryError
from models import AssignmentKind, Port, PortDirection, SavePayload
from registry_http import HttpAssignmentRegistry, HttpPortRegistry


def _transport(status: int = 200, body=None, seen=None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


# ---------------------------------------------------------------------------
# Port registry
# ---------------------------------------------------------------------------


class TestPortRegistry:
    def test_lists_ports(self) -> None:
        seen = []
        body = {"ports": [
            {"path": "system:playback_1", "direction": "in"},
            {"path": "mixer:out_1", "direction": "OUT"},
            {"path": "mixer:out_2", "direction": "output"},
        ]}
        reg = HttpPortRegistry("http://ports.local:50000/", transport=_transport(body=body, seen=seen))

        assert reg.list_ports() == [
            Port("system:playback_1", PortDirection.IN),
            Port("mixer:out_1", PortDirection.OUT),
            Port("mixer:out_2", PortDirection.OUT),
        ]
        assert seen[0].method == "GET"
        assert str(seen[0].url) == "http://ports.local:50000/ports"

    def test_skips_unknown_direction_and_missing_path(self) -> None:
        body = {"ports": [
            {"path": "a", "direction": "sideways"},
            {"direction": "out"},
            {"path": "b", "direction": "out"},
        ]}
        reg = HttpPortRegistry("http://ports", transport=_transport(body=body))
        assert [p.path for p in reg.list_ports()] == ["b"]

    def test_missing_list_is_an_error(self) -> None:
        reg = HttpPortRegistry("http://ports", transport=_transport(body={"nope": []}))
        with pytest.raises(RegistryError):
            reg.list_ports()

    def test_server_error(self) -> None:
        reg = HttpPortRegistry("http://ports", transport=_transport(status=503))
        with pytest.raises(RegistryError, match="503"):
            reg.list_ports()

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        reg = HttpPortRegistry("http://ports", transport=httpx.MockTransport(handler))
        with pytest.raises(RegistryError, match="unreachable"):
            reg.list_ports()


# ---------------------------------------------------------------------------
# Assignment registry
# ---------------------------------------------------------------------------


class TestAssignmentRegistry:
    def test_lists_inputs(self) -> None:
        body = {"inputs": [
            {"id": 1, "name": "Mic", "input_type": "MONO_INPUT", "left_port_path": "portA"},
            {"id": 2, "name": "Keys", "input_type": "stereo", "left_port_path": "a", "right_port_path": "b"},
            {"id": 3, "name": "Spare", "input_type": "none", "left_port_path": ""},
            {"id": "4", "name": "Odd", "input_type": "SURROUND"},
        ]}
        reg = HttpAssignmentRegistry("http://assign", transport=_transport(body=body))
        inputs = reg.list_inputs()

        assert [i.id for i in inputs] == [1, 2, 3, 4]
        assert inputs[0].kind is AssignmentKind.MONO
        assert inputs[0].right_port_path is None
        assert (inputs[1].left_port_path, inputs[1].right_port_path) == ("a", "b")
        assert inputs[2].kind is AssignmentKind.NONE
        assert inputs[2].left_port_path is None
        assert inputs[3].kind is None

    def test_input_without_id_is_an_error(self) -> None:
        reg = HttpAssignmentRegistry("http://assign", transport=_transport(body={"inputs": [{"name": "x"}]}))
        with pytest.raises(RegistryError):
            reg.list_inputs()

    def test_invalid_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"not json")

        reg = HttpAssignmentRegistry("http://assign", transport=httpx.MockTransport(handler))
        with pytest.raises(RegistryError, match="invalid JSON"):
            reg.list_inputs()

    def test_update_assignment_request(self) -> None:
        seen = []
        reg = HttpAssignmentRegistry("http://assign", transport=_transport(status=204, seen=seen))
        reg.update_assignment(7, SavePayload(AssignmentKind.STEREO, "portA", "portB"))

        req = seen[0]
        assert req.method == "PUT"
        assert req.url.path == "/inputs/7/assignment"
        assert json.loads(req.content) == {
            "input_type": "stereo",
            "left_port_path": "portA",
            "right_port_path": "portB",
        }

    def test_update_assignment_failure(self) -> None:
        reg = HttpAssignmentRegistry("http://assign", transport=_transport(status=500))
        with pytest.raises(RegistryError):
            reg.update_assignment(1, SavePayload(AssignmentKind.NONE, None, None))
