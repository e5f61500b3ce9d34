# store_config.py
from __future__ import annotations

import configparser
import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from errors import ConfigError


DEFAULT_PORT_REGISTRY_URL = "http://127.0.0.1:50000"
DEFAULT_ASSIGNMENT_REGISTRY_URL = "http://127.0.0.1:50001"

ENV_PORT_REGISTRY_URL = "INPUTSETUP_PORT_REGISTRY_URL"
ENV_ASSIGNMENT_REGISTRY_URL = "INPUTSETUP_ASSIGNMENT_REGISTRY_URL"

DEFAULT_CONFIG_TEXT = f"""\
[Registries]
port_registry_url = {DEFAULT_PORT_REGISTRY_URL}
assignment_registry_url = {DEFAULT_ASSIGNMENT_REGISTRY_URL}
request_timeout =

[Logging]
level = INFO
"""

_DEFAULTS = {
    "Registries": {
        "port_registry_url": DEFAULT_PORT_REGISTRY_URL,
        "assignment_registry_url": DEFAULT_ASSIGNMENT_REGISTRY_URL,
        "request_timeout": "",
    },
    "Logging": {
        "level": "INFO",
    },
}


def _windows_appdata_dir() -> Path:
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata)
    return Path.home() / "AppData" / "Roaming"


def _linux_xdg_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def user_config_dir(app_name: str) -> Path:
    sysname = (platform.system() or "").lower()
    if sysname.startswith("windows"):
        return _windows_appdata_dir() / app_name
    if sysname.startswith("linux"):
        return _linux_xdg_config_dir() / app_name
    return Path.home() / ".config" / app_name


def parse_timeout(raw: str) -> Optional[float]:
    s = (raw or "").strip()
    if not s:
        return None
    try:
        v = float(s)
    except ValueError as e:
        raise ConfigError(f"request_timeout must be a number of seconds, got {raw!r}") from e
    return v if v > 0 else None


@dataclass(frozen=True)
class RegistryConfig:
    port_registry_url: str
    assignment_registry_url: str
    request_timeout: Optional[float] = None


@dataclass(frozen=True)
class ConfigStore:
    app_name: str = "inputsetup"
    filename: str = "inputsetup.cfg"
    base_dir: Optional[Path] = None

    @property
    def dir_path(self) -> Path:
        if self.base_dir is not None:
            return self.base_dir
        return user_config_dir(self.app_name)

    @property
    def file_path(self) -> Path:
        return self.dir_path / self.filename

    def ensure_exists(self) -> None:
        self.dir_path.mkdir(parents=True, exist_ok=True)
        if not self.file_path.exists():
            self.file_path.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")

    def load(self) -> configparser.ConfigParser:
        self.ensure_exists()
        cfg = configparser.ConfigParser()
        try:
            cfg.read(self.file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigError(f"Cannot parse {self.file_path}: {e}") from e

        filled = False
        for section, keys in _DEFAULTS.items():
            if not cfg.has_section(section):
                cfg.add_section(section)
            for key, default in keys.items():
                if not cfg.has_option(section, key):
                    cfg.set(section, key, default)
                    filled = True

        # Older files gain any keys added since they were written.
        if filled:
            self.save(cfg)
        return cfg

    def save(self, cfg: configparser.ConfigParser) -> None:
        self.ensure_exists()
        with self.file_path.open("w", encoding="utf-8") as f:
            cfg.write(f)

    def registry_config(self) -> RegistryConfig:
        cfg = self.load()
        port_url = os.environ.get(ENV_PORT_REGISTRY_URL) or cfg.get("Registries", "port_registry_url")
        assign_url = os.environ.get(ENV_ASSIGNMENT_REGISTRY_URL) or cfg.get("Registries", "assignment_registry_url")

        port_url = port_url.strip()
        assign_url = assign_url.strip()
        if not port_url:
            raise ConfigError("port_registry_url is not set.")
        if not assign_url:
            raise ConfigError("assignment_registry_url is not set.")

        return RegistryConfig(
            port_registry_url=port_url,
            assignment_registry_url=assign_url,
            request_timeout=parse_timeout(cfg.get("Registries", "request_timeout")),
        )

    def log_level(self) -> str:
        return self.load().get("Logging", "level").strip().upper() or "INFO"
