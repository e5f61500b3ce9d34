# models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple


class PortDirection(Enum):
    IN = "in"
    OUT = "out"


class AssignmentKind(Enum):
    MONO = "Mono"
    STEREO = "Stereo"
    NONE = "None"

    def __str__(self) -> str:
        return self.value


class SaveStatus(Enum):
    INVALID = "invalid"
    VALID_UNSAVED = "unsaved"
    VALID_SAVED = "saved"


@dataclass(frozen=True)
class Port:
    path: str
    direction: PortDirection


@dataclass(frozen=True)
class RemoteInput:
    id: int
    name: str
    kind: Optional[AssignmentKind]  # None when the registry sent a type we don't know
    left_port_path: Optional[str]
    right_port_path: Optional[str]


@dataclass(frozen=True)
class SavePayload:
    kind: AssignmentKind
    left_port_path: Optional[str]
    right_port_path: Optional[str]


@dataclass
class InputRecord:
    input_id: int
    name: str
    kind: Optional[AssignmentKind]
    left_path: Optional[str] = None
    right_path: Optional[str] = None
    committed: bool = True
    revision: int = 0


@dataclass(frozen=True)
class PortIndex:
    inputs: Tuple[str, ...] = ()
    outputs: Tuple[str, ...] = ()

    @classmethod
    def from_ports(cls, ports: Iterable[Port]) -> "PortIndex":
        ports = list(ports)
        ins = tuple(p.path for p in ports if p.direction is PortDirection.IN)
        outs = tuple(p.path for p in ports if p.direction is PortDirection.OUT)
        return cls(inputs=ins, outputs=outs)

    def is_output(self, path: str) -> bool:
        return path in self.outputs


@dataclass(frozen=True)
class InputView:
    input_id: int
    name: str
    kind: Optional[AssignmentKind]
    left_path: Optional[str]
    right_path: Optional[str]
    committed: bool
    revision: int
    status: SaveStatus


@dataclass(frozen=True)
class Snapshot:
    records: Tuple[InputView, ...]
    ports: PortIndex

    def record(self, input_id: int) -> Optional[InputView]:
        for r in self.records:
            if r.input_id == input_id:
                return r
        return None
