# messages.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from models import AssignmentKind, Port, RemoteInput


@dataclass(frozen=True)
class Load:
    pass


@dataclass(frozen=True)
class KindChanged:
    input_id: int
    kind: AssignmentKind


@dataclass(frozen=True)
class LeftPortChanged:
    input_id: int
    path: Optional[str]


@dataclass(frozen=True)
class RightPortChanged:
    input_id: int
    path: Optional[str]


@dataclass(frozen=True)
class RetrySave:
    input_id: int


# Internal: produced by finished tasks, never by the operator.

@dataclass(frozen=True)
class InputsLoaded:
    generation: int
    inputs: Tuple[RemoteInput, ...]


@dataclass(frozen=True)
class PortsLoaded:
    generation: int
    ports: Tuple[Port, ...]


@dataclass(frozen=True)
class LoadFailed:
    generation: int
    error: str


@dataclass(frozen=True)
class SaveCompleted:
    input_id: int
    revision: int


@dataclass(frozen=True)
class SaveFailed:
    input_id: int
    revision: int
    error: str


Message = Union[
    Load,
    KindChanged,
    LeftPortChanged,
    RightPortChanged,
    RetrySave,
    InputsLoaded,
    PortsLoaded,
    LoadFailed,
    SaveCompleted,
    SaveFailed,
]
