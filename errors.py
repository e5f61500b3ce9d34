# errors.py
from __future__ import annotations


class RegistryError(RuntimeError):
    """A registry call failed: transport, status or payload."""


class ConfigError(RuntimeError):
    pass


class RecordNotFound(RuntimeError):
    """An input id that the store never handed out. Always a programming error."""

    def __init__(self, input_id: int) -> None:
        super().__init__(f"No mixer input with id {input_id}.")
        self.input_id = input_id


class DuplicateInput(RuntimeError):
    def __init__(self, input_id: int) -> None:
        super().__init__(f"Mixer input id {input_id} listed more than once.")
        self.input_id = input_id
