# state_store.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from errors import DuplicateInput, RecordNotFound
from models import AssignmentKind, InputRecord


class AssignmentStore:
    """Ordered per-input records. Owned by the controller; nothing else mutates it."""

    def __init__(self) -> None:
        self._records: List[InputRecord] = []
        self._by_id: Dict[int, InputRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, input_id: object) -> bool:
        return input_id in self._by_id

    def replace(self, records: Iterable[InputRecord]) -> None:
        ordered = list(records)
        by_id: Dict[int, InputRecord] = {}
        for r in ordered:
            if r.input_id in by_id:
                raise DuplicateInput(r.input_id)
            by_id[r.input_id] = r
        self._records = ordered
        self._by_id = by_id

    def records(self) -> List[InputRecord]:
        return list(self._records)

    def get(self, input_id: int) -> InputRecord:
        r = self._by_id.get(input_id)
        if r is None:
            raise RecordNotFound(input_id)
        return r

    def _touch(self, input_id: int, revision: int) -> InputRecord:
        r = self.get(input_id)
        r.committed = False
        r.revision = revision
        return r

    def set_kind(self, input_id: int, kind: AssignmentKind, revision: int) -> InputRecord:
        r = self._touch(input_id, revision)
        r.kind = kind
        return r

    def set_left_path(self, input_id: int, path: Optional[str], revision: int) -> InputRecord:
        r = self._touch(input_id, revision)
        r.left_path = path
        return r

    def set_right_path(self, input_id: int, path: Optional[str], revision: int) -> InputRecord:
        r = self._touch(input_id, revision)
        r.right_path = path
        return r

    def mark_committed(self, input_id: int, revision: int) -> bool:
        r = self.get(input_id)
        if r.revision != revision or r.committed:
            return False
        r.committed = True
        return True
