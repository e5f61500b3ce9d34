"""Shared fixtures: fake registries, a hand-cranked task runner, a Qt core app."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

import pytest
from PySide6.QtCore import QCoreApplication

from controller import AssignmentController
from messages import Load
from models import AssignmentKind, Port, PortDirection, RemoteInput, SavePayload


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


@dataclass
class FakeBackend:
    inputs: List[RemoteInput] = field(default_factory=list)
    ports: List[Port] = field(default_factory=list)
    inputs_error: Optional[Exception] = None
    ports_error: Optional[Exception] = None
    update_error: Optional[Exception] = None
    updates: List[Tuple[int, SavePayload]] = field(default_factory=list)
    closed: bool = False

    def list_inputs(self) -> List[RemoteInput]:
        if self.inputs_error is not None:
            raise self.inputs_error
        return list(self.inputs)

    def list_ports(self) -> List[Port]:
        if self.ports_error is not None:
            raise self.ports_error
        return list(self.ports)

    def update_assignment(self, input_id: int, payload: SavePayload) -> None:
        self.updates.append((input_id, payload))
        if self.update_error is not None:
            raise self.update_error

    def close(self) -> None:
        self.closed = True


@dataclass
class _Pending:
    fn: Callable[[], Any]
    on_done: Callable[[Any], None]
    on_error: Callable[[BaseException], None]


class ManualRunner:
    """Task runner that only runs a task when the test says so, in any order."""

    def __init__(self) -> None:
        self.tasks: List[_Pending] = []

    def submit(self, fn, on_done, on_error) -> None:
        self.tasks.append(_Pending(fn, on_done, on_error))

    def run(self, index: int = 0) -> None:
        task = self.tasks.pop(index)
        try:
            result = task.fn()
        except Exception as e:
            task.on_error(e)
            return
        task.on_done(result)

    def run_all(self) -> None:
        while self.tasks:
            self.run(0)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def ports() -> List[Port]:
    return [
        Port(path="portA", direction=PortDirection.OUT),
        Port(path="portB", direction=PortDirection.OUT),
        Port(path="capture_1", direction=PortDirection.IN),
    ]


@pytest.fixture
def backend(ports) -> FakeBackend:
    return FakeBackend(
        inputs=[
            RemoteInput(id=1, name="Mic", kind=AssignmentKind.MONO, left_port_path="portA", right_port_path=None),
            RemoteInput(id=7, name="Keys", kind=AssignmentKind.STEREO, left_port_path="portA", right_port_path="portB"),
        ],
        ports=ports,
    )


@pytest.fixture
def runner() -> ManualRunner:
    return ManualRunner()


@pytest.fixture
def controller(qapp, backend, runner) -> AssignmentController:
    return AssignmentController(backend, runner)


@pytest.fixture
def loaded(controller, runner) -> AssignmentController:
    controller.dispatch(Load())
    runner.run_all()
    return controller

