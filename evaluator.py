# evaluator.py
from __future__ import annotations

from models import AssignmentKind, InputRecord, SavePayload, SaveStatus


def is_valid(record: InputRecord) -> bool:
    kind = record.kind
    if kind is None:
        return False
    if kind is AssignmentKind.NONE:
        return True
    if kind is AssignmentKind.MONO:
        return record.left_path is not None
    if kind is AssignmentKind.STEREO:
        return record.left_path is not None and record.right_path is not None
    return False


def status(record: InputRecord) -> SaveStatus:
    if not is_valid(record):
        return SaveStatus.INVALID
    if record.committed:
        return SaveStatus.VALID_SAVED
    return SaveStatus.VALID_UNSAVED


def save_payload(record: InputRecord) -> SavePayload:
    """
    Build the update request for a record. Only the paths its kind needs are sent;
    a stereo path left over from an earlier edit is not sent for a mono input.
    """
    if not is_valid(record):
        raise ValueError(f"Input {record.input_id} is not complete for its kind.")

    kind = record.kind
    if kind is AssignmentKind.MONO:
        return SavePayload(kind=kind, left_port_path=record.left_path, right_port_path=None)
    if kind is AssignmentKind.STEREO:
        return SavePayload(kind=kind, left_port_path=record.left_path, right_port_path=record.right_path)
    return SavePayload(kind=AssignmentKind.NONE, left_port_path=None, right_port_path=None)
