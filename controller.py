# controller.py
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from backend import RegistryBackend
from errors import DuplicateInput
from evaluator import is_valid, save_payload, status
from messages import (
    InputsLoaded,
    KindChanged,
    LeftPortChanged,
    Load,
    LoadFailed,
    Message,
    PortsLoaded,
    RetrySave,
    RightPortChanged,
    SaveCompleted,
    SaveFailed,
)
from models import InputRecord, InputView, Port, PortIndex, RemoteInput, Snapshot
from state_store import AssignmentStore
from tasks import TaskRunner


logger = logging.getLogger(__name__)


@dataclass
class _LoadJoin:
    generation: int
    inputs: Optional[Tuple[RemoteInput, ...]] = None
    ports: Optional[Tuple[Port, ...]] = None

    def complete(self) -> bool:
        return self.inputs is not None and self.ports is not None


def record_from_remote(ri: RemoteInput, revision: int) -> InputRecord:
    return InputRecord(
        input_id=ri.id,
        name=ri.name,
        kind=ri.kind,
        left_path=ri.left_port_path,
        right_path=ri.right_port_path,
        committed=True,
        revision=revision,
    )


def view_of(r: InputRecord) -> InputView:
    return InputView(
        input_id=r.input_id,
        name=r.name,
        kind=r.kind,
        left_path=r.left_path,
        right_path=r.right_path,
        committed=r.committed,
        revision=r.revision,
        status=status(r),
    )


class AssignmentController(QObject):
    """
    Owns the mixer input records and reconciles them with the assignment registry.

    Everything goes through dispatch(). Remote calls run on the task runner and come
    back as messages, so state is only ever touched on the controller's own thread.

    Every edit takes a fresh revision from one counter and every save carries the
    revision it was built from. A completion only marks the record committed when its
    revision is still the record's current one; anything older is dropped.
    """

    snapshot_changed = Signal(object)
    load_failed = Signal(str)
    loading_changed = Signal(bool)

    def __init__(self, backend: RegistryBackend, runner: TaskRunner, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._backend = backend
        self._runner = runner

        self._store = AssignmentStore()
        self._ports = PortIndex()
        self._revisions = itertools.count(1)

        self._load_generation = 0
        self._pending_load: Optional[_LoadJoin] = None

        self._handlers: Dict[type, Callable[[Any], None]] = {
            Load: self._on_load,
            InputsLoaded: self._on_inputs_loaded,
            PortsLoaded: self._on_ports_loaded,
            LoadFailed: self._on_load_failed,
            KindChanged: self._on_kind_changed,
            LeftPortChanged: self._on_left_port_changed,
            RightPortChanged: self._on_right_port_changed,
            RetrySave: self._on_retry_save,
            SaveCompleted: self._on_save_completed,
            SaveFailed: self._on_save_failed,
        }

    @property
    def is_loading(self) -> bool:
        return self._pending_load is not None

    def snapshot(self) -> Snapshot:
        return Snapshot(
            records=tuple(view_of(r) for r in self._store.records()),
            ports=self._ports,
        )

    def dispatch(self, message: Message) -> None:
        handler = self._handlers.get(type(message))
        if handler is None:
            raise TypeError(f"Unknown message: {message!r}")
        handler(message)

    def _publish(self) -> None:
        self.snapshot_changed.emit(self.snapshot())

    # -- load ---------------------------------------------------------------

    def _on_load(self, _msg: Load) -> None:
        was_loading = self.is_loading
        self._load_generation += 1
        gen = self._load_generation
        self._pending_load = _LoadJoin(generation=gen)
        logger.info("Loading mixer inputs and ports (load %s)", gen)

        self._runner.submit(
            self._backend.list_inputs,
            partial(self._inputs_done, gen),
            partial(self._load_error, gen),
        )
        self._runner.submit(
            self._backend.list_ports,
            partial(self._ports_done, gen),
            partial(self._load_error, gen),
        )

        if not was_loading:
            self.loading_changed.emit(True)

    def _inputs_done(self, gen: int, inputs: List[RemoteInput]) -> None:
        self.dispatch(InputsLoaded(generation=gen, inputs=tuple(inputs)))

    def _ports_done(self, gen: int, ports: List[Port]) -> None:
        self.dispatch(PortsLoaded(generation=gen, ports=tuple(ports)))

    def _load_error(self, gen: int, error: BaseException) -> None:
        self.dispatch(LoadFailed(generation=gen, error=str(error) or type(error).__name__))

    def _current_join(self, gen: int) -> Optional[_LoadJoin]:
        join = self._pending_load
        if join is None or join.generation != gen:
            logger.debug("Dropping result of superseded load %s", gen)
            return None
        return join

    def _on_inputs_loaded(self, msg: InputsLoaded) -> None:
        join = self._current_join(msg.generation)
        if join is None:
            return
        join.inputs = msg.inputs
        self._finish_load(join)

    def _on_ports_loaded(self, msg: PortsLoaded) -> None:
        join = self._current_join(msg.generation)
        if join is None:
            return
        join.ports = msg.ports
        self._finish_load(join)

    def _finish_load(self, join: _LoadJoin) -> None:
        if not join.complete():
            return

        records = [record_from_remote(ri, next(self._revisions)) for ri in join.inputs]
        try:
            self._store.replace(records)
        except DuplicateInput as e:
            self._fail_load(str(e))
            return

        self._ports = PortIndex.from_ports(join.ports)
        self._pending_load = None
        logger.info(
            "Loaded %d mixer inputs, %d output ports, %d input ports",
            len(records), len(self._ports.outputs), len(self._ports.inputs),
        )
        self.loading_changed.emit(False)
        self._publish()

    def _on_load_failed(self, msg: LoadFailed) -> None:
        if self._current_join(msg.generation) is None:
            return
        self._fail_load(msg.error)

    def _fail_load(self, error: str) -> None:
        self._pending_load = None
        logger.error("Loading from the registries failed: %s", error)
        self.loading_changed.emit(False)
        self.load_failed.emit(error)

    # -- edits --------------------------------------------------------------

    def _warn_unknown_output(self, path: Optional[str]) -> None:
        if path is not None and not self._ports.is_output(path):
            logger.warning("%r is not a known output port", path)

    def _on_kind_changed(self, msg: KindChanged) -> None:
        r = self._store.set_kind(msg.input_id, msg.kind, next(self._revisions))
        self._attempt_save(r)
        self._publish()

    def _on_left_port_changed(self, msg: LeftPortChanged) -> None:
        self._warn_unknown_output(msg.path)
        r = self._store.set_left_path(msg.input_id, msg.path, next(self._revisions))
        self._attempt_save(r)
        self._publish()

    def _on_right_port_changed(self, msg: RightPortChanged) -> None:
        self._warn_unknown_output(msg.path)
        r = self._store.set_right_path(msg.input_id, msg.path, next(self._revisions))
        self._attempt_save(r)
        self._publish()

    def _on_retry_save(self, msg: RetrySave) -> None:
        r = self._store.get(msg.input_id)
        if r.committed:
            return
        self._attempt_save(r)

    # -- saves --------------------------------------------------------------

    def _attempt_save(self, r: InputRecord) -> None:
        if not is_valid(r):
            logger.debug("Input %s incomplete for %s; not saving", r.input_id, r.kind)
            return

        payload = save_payload(r)
        logger.debug("Saving input %s revision %s: %s", r.input_id, r.revision, payload)
        self._runner.submit(
            partial(self._backend.update_assignment, r.input_id, payload),
            partial(self._save_done, r.input_id, r.revision),
            partial(self._save_error, r.input_id, r.revision),
        )

    def _save_done(self, input_id: int, revision: int, _ack: Any) -> None:
        self.dispatch(SaveCompleted(input_id=input_id, revision=revision))

    def _save_error(self, input_id: int, revision: int, error: BaseException) -> None:
        self.dispatch(SaveFailed(input_id=input_id, revision=revision, error=str(error) or type(error).__name__))

    def _on_save_completed(self, msg: SaveCompleted) -> None:
        # A reload can drop an id while its save is still in flight.
        if msg.input_id not in self._store:
            logger.debug("Save for input %s finished after reload; dropped", msg.input_id)
            return
        if self._store.mark_committed(msg.input_id, msg.revision):
            self._publish()
        else:
            logger.debug("Stale or repeated save completion for input %s revision %s", msg.input_id, msg.revision)

    def _on_save_failed(self, msg: SaveFailed) -> None:
        if msg.input_id not in self._store:
            logger.debug("Save for input %s failed after reload; dropped", msg.input_id)
            return
        logger.warning("Saving input %s (revision %s) failed: %s", msg.input_id, msg.revision, msg.error)
