from .argv import EmptyCommandError, join_continuations, split_command
from .config import Config, ConfigStorage, ExecOptions, default_exec_options
from .fake_shell import FakeShell
from .shell import Executor, Shell, ShellError, execute, get_lines, run, split_lines

VERSION = "0.1.0"

__all__ = [
    "Config",
    "ConfigStorage",
    "EmptyCommandError",
    "ExecOptions",
    "Executor",
    "FakeShell",
    "Shell",
    "ShellError",
    "VERSION",
    "default_exec_options",
    "execute",
    "get_lines",
    "join_continuations",
    "run",
    "split_command",
    "split_lines",
]
