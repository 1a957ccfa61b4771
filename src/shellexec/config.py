"""Execution options and the TOML file that provides their defaults."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit import TOMLDocument
from tomlkit.items import Table

from . import dirs

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "shellexec.toml"


@dataclass(frozen=True)
class ExecOptions:
    silent: bool = False
    """Only capture output, without mirroring it to the terminal."""

    trim_output: bool = False
    """Strip leading and trailing whitespace from successful output."""

    @staticmethod
    def from_toml(table: Table | dict[str, Any]) -> "ExecOptions":
        def get(key: str) -> bool:
            value = table.get(key, False)
            if not isinstance(value, bool):
                raise TypeError(f"Expected boolean for {key!r}, found: {value!r}")
            return value

        return ExecOptions(silent=get("silent"), trim_output=get("trim_output"))

    def to_toml(self) -> Table:
        table = tomlkit.table()
        table["silent"] = self.silent
        table["trim_output"] = self.trim_output
        return table


@dataclass
class Config:
    exec_options: ExecOptions = field(default_factory=ExecOptions)
    """Options for `execute` and `run` calls that don't pass their own."""

    @staticmethod
    def from_toml(document: TOMLDocument) -> "Config":
        return Config(
            exec_options=ExecOptions.from_toml(document.get("exec", tomlkit.table()))
        )

    def to_toml(self) -> TOMLDocument:
        document = tomlkit.document()
        document["exec"] = self.exec_options.to_toml()
        return document


def find_config_file(start_dir: Path) -> Path | None:
    """Nearest config file in `start_dir`, its parents, or the user config dir."""
    for directory in (start_dir, *start_dir.parents, dirs.app_dir):
        path = directory / CONFIG_FILE_NAME
        if path.exists():
            return path
    return None


class ConfigStorage:
    """Reads and updates the config file.

    A missing file reads as the default `Config`, and is only created once a
    change is saved.
    """

    def __init__(self, path_override: Path | None = None):
        self._path_override = path_override

    @cached_property
    def path(self) -> Path:
        if self._path_override:
            return self._path_override
        if found := find_config_file(Path.cwd()):
            logger.debug(f"Using config file: {found}")
            return found
        return dirs.app_dir / CONFIG_FILE_NAME

    def load(self) -> Config:
        if not self.path.exists():
            return Config()
        return Config.from_toml(tomlkit.parse(self.path.read_text()))

    def save(self, config: Config) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Writing to config file: {self.path}")
        self.path.write_text(tomlkit.dumps(config.to_toml()))

    @contextmanager
    def open(self) -> Iterator[Config]:
        """Yield the config for modification, saving it only if it changed."""
        config = self.load()
        original = deepcopy(config)
        yield config
        if config != original:
            self.save(config)


def default_exec_options() -> ExecOptions:
    """Options from the nearest config file, or the built-in defaults."""
    return ConfigStorage().load().exec_options
