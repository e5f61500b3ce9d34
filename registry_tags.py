# registry_tags.py
from __future__ import annotations

from typing import Any, Optional

from models import AssignmentKind, PortDirection


_KIND_TAGS = {
    "mono": AssignmentKind.MONO, "mono_input": AssignmentKind.MONO, "monoinput": AssignmentKind.MONO,
    "stereo": AssignmentKind.STEREO, "stereo_input": AssignmentKind.STEREO, "stereoinput": AssignmentKind.STEREO,
    "none": AssignmentKind.NONE, "no_input": AssignmentKind.NONE, "noinput": AssignmentKind.NONE,
}

_DIRECTION_TAGS = {
    "in": PortDirection.IN, "input": PortDirection.IN,
    "out": PortDirection.OUT, "output": PortDirection.OUT,
}


def _norm(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip().lower().replace("-", "_")


def kind_from_tag(v: Any) -> Optional[AssignmentKind]:
    return _KIND_TAGS.get(_norm(v))


def kind_to_tag(kind: AssignmentKind) -> str:
    return kind.value.lower()


def direction_from_tag(v: Any) -> Optional[PortDirection]:
    return _DIRECTION_TAGS.get(_norm(v))


def path_or_none(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None
