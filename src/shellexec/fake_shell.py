"""Fake Executor implementation for testing and demos."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit
from tomlkit.items import Table

from .argv import join_continuations, split_command
from .config import ExecOptions
from .shell import ShellError


@dataclass
class FakeShell:
    """Executor that replies with canned output instead of spawning processes.

    Responses are keyed by the command string, after line continuations are
    joined. An `Exception` response is returned as the error for that command.
    Commands without a response get `default` as their output.
    """

    responses: dict[str, str | Exception] = field(default_factory=dict)
    default: str = ""

    commands: list[str] = field(default_factory=list, init=False)
    """Every command received, in order."""

    def exec(
        self, command: str, options: ExecOptions = ExecOptions()
    ) -> tuple[str, Exception | None]:
        # Empty commands are rejected just like a real Shell would.
        split_command(command)
        command = join_continuations(command)
        self.commands.append(command)
        response = self.responses.get(command, self.default)
        if isinstance(response, Exception):
            return "", response
        if options.trim_output:
            return response.strip(), None
        return response, None

    @staticmethod
    def from_toml(toml: str | Path) -> "FakeShell":
        """Load canned responses from a TOML file.

        Each `[[commands]]` entry has a `command` and either an `output` or a
        non-zero `returncode`, in which case `output` becomes the error output.
        """
        if isinstance(toml, Path):
            toml = toml.read_text()
        document = tomlkit.loads(toml)
        tables = document.get("commands", tomlkit.aot())
        assert isinstance(tables, list)
        return FakeShell(dict(_response_from_toml(t) for t in tables))

    def to_toml(self) -> str:
        doc = tomlkit.document()
        commands = tomlkit.aot()
        for command, response in self.responses.items():
            commands.append(_response_to_toml(command, response))
        doc["commands"] = commands
        return tomlkit.dumps(doc)


def _response_from_toml(table: Table | Mapping) -> tuple[str, str | Exception]:
    command = str(table["command"])
    output = str(table.get("output", ""))
    returncode = table.get("returncode", 0)
    assert isinstance(returncode, int)
    if returncode:
        return command, ShellError(returncode, split_command(command), output)
    return command, output


def _response_to_toml(command: str, response: str | Exception) -> Table:
    table = tomlkit.table()
    table["command"] = command
    match response:
        case ShellError():
            table["output"] = response.output
            table["returncode"] = response.returncode
        case Exception():
            raise ValueError(f"Cannot save {type(response).__name__} response to TOML")
        case _:
            table["output"] = response
    return table
