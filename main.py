# main.py
from __future__ import annotations

import logging
import sys
from typing import List, Optional

from PySide6.QtCore import QCoreApplication, QTimer

from backend import RegistryBackend
from controller import AssignmentController
from errors import ConfigError
from messages import Load
from models import Snapshot
from store_config import ConfigStore
from tasks import QtTaskRunner


APP_NAME = "Input Setup"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def log_snapshot(snap: Snapshot) -> None:
    for r in snap.records:
        kind = str(r.kind) if r.kind is not None else "unset"
        logger.info(
            "%-20s %-7s L=%s R=%s [%s]",
            r.name, kind, r.left_path or "-", r.right_path or "-", r.status.value,
        )


def main(argv: Optional[List[str]] = None) -> int:
    store = ConfigStore()
    try:
        configure_logging(store.log_level())
        config = store.registry_config()
    except ConfigError as e:
        configure_logging("INFO")
        logger.error("Configuration error: %s", e)
        return 2

    app = QCoreApplication.instance() or QCoreApplication(argv if argv is not None else sys.argv)
    app.setApplicationName(APP_NAME)

    backend = RegistryBackend.from_config(config)
    runner = QtTaskRunner()
    controller = AssignmentController(backend, runner)

    def on_loaded(snap: Snapshot) -> None:
        log_snapshot(snap)
        app.exit(0)

    def on_failed(error: str) -> None:
        logger.error("Cannot start: %s", error)
        app.exit(1)

    controller.snapshot_changed.connect(on_loaded)
    controller.load_failed.connect(on_failed)
    QTimer.singleShot(0, lambda: controller.dispatch(Load()))

    try:
        return app.exec()
    finally:
        runner.wait()
        backend.close()


if __name__ == "__main__":
    raise SystemExit(main())
