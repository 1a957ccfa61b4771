"""Library for running simple external binaries."""
import logging
import os
import subprocess
import sys
import threading
from contextlib import suppress
from dataclasses import dataclass
from typing import IO, Any, Protocol

from .argv import split_command
from .capture import CaptureBuffer, Mirror, Tee
from .config import ExecOptions, default_exec_options

logger = logging.getLogger(__name__)

# Upper bound on bytes read from a pipe at once.
CHUNK_SIZE = 64 * 1024


class ShellError(subprocess.CalledProcessError):
    """A command exited with a non-zero status or was killed by a signal.

    The message embeds everything the command wrote to stdout and stderr.
    """

    def __init__(self, returncode: int, argv: list[str], output: str):
        super().__init__(returncode, argv, output=output)

    @property
    def argv(self) -> list[str]:
        return self.cmd

    def __str__(self) -> str:
        return f"Shell error: {self.output}"


class Executor(Protocol):
    """Anything that can run a command string."""

    def exec(
        self, command: str, options: ExecOptions = ExecOptions()
    ) -> tuple[str, Exception | None]:
        ...


@dataclass
class _Drain:
    """Copies a pipe into a sink until EOF.

    The first failure is kept in `error` and reading carries on, so the child is
    never left blocked on a full pipe. If two reads in a row fail, the pipe is
    closed instead, which makes further writes by the child fail.
    """

    source: IO[bytes]
    sink: Tee
    error: Exception | None = None

    def __call__(self) -> None:
        failed_reads = 0
        while True:
            try:
                chunk = self.source.read1(CHUNK_SIZE)
            except Exception as e:
                self._fail(e)
                failed_reads += 1
                if failed_reads > 1:
                    with suppress(Exception):
                        self.source.close()
                    return
                continue
            failed_reads = 0
            if not chunk:
                break
            try:
                self.sink.write(chunk)
            except Exception as e:
                self._fail(e)
        if self.sink.error:
            self._fail(self.sink.error)

    def _fail(self, error: Exception) -> None:
        if self.error is None:
            self.error = error


@dataclass
class Shell:
    """Runs commands directly (no shell interpreter), capturing their output."""

    stdout: IO[Any] | None = None
    """Stream that stdout is mirrored to. Defaults to `sys.stdout` at call time."""

    stderr: IO[Any] | None = None
    """Stream that stderr is mirrored to. Defaults to `sys.stderr` at call time."""

    def exec(
        self, command: str, options: ExecOptions = ExecOptions()
    ) -> tuple[str, Exception | None]:
        """Run `command` and return its combined stdout and stderr output.

        Failures are returned rather than raised, together with whatever output
        was captured before the failure. The only exception raised is
        `EmptyCommandError` for a command without a program name.
        """
        argv = split_command(command)
        output = CaptureBuffer()

        logger.debug(f"Running command: {argv}")
        try:
            process = subprocess.Popen(
                argv,
                env=dict(os.environ),
                stdin=None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            logger.debug(f"Could not start {argv[0]!r}: {e}")
            return output.text(), e

        with process:
            assert process.stdout and process.stderr
            stdout_drain = _Drain(process.stdout, self._tee(output, "stdout", options))
            stderr_drain = _Drain(process.stderr, self._tee(output, "stderr", options))

            # Draining both pipes at once keeps the child from blocking on a
            # full pipe while we wait on the other one.
            worker = threading.Thread(
                target=stdout_drain, name=f"drain-stdout-{process.pid}", daemon=True
            )
            worker.start()
            stderr_drain()
            worker.join()

            returncode = process.wait()

        text = output.text()
        if returncode != 0:
            logger.error(f"Command:\n{command}\nExited with status {returncode}")
            if text:
                logger.error(f"output:\n{text}")
            return text, ShellError(returncode, argv, text)
        if stderr_drain.error:
            return text, stderr_drain.error
        if stdout_drain.error:
            return text, stdout_drain.error
        if options.trim_output:
            return text.strip(), None
        return text, None

    def _tee(self, output: CaptureBuffer, name: str, options: ExecOptions) -> Tee:
        if options.silent:
            return Tee(output)
        stream = getattr(self, name) or getattr(sys, name)
        return Tee(output, Mirror(stream))


def execute(
    command: str, options: ExecOptions | None = None
) -> tuple[str, Exception | None]:
    """Run `command` with a default `Shell`. See `Shell.exec`.

    Without explicit `options`, the defaults come from the nearest
    `shellexec.toml` file.
    """
    if options is None:
        options = default_exec_options()
    return Shell().exec(command, options)


def run(command: str, options: ExecOptions | None = None) -> str:
    """Execute command and return its output, raising on any failure."""
    output, error = execute(command, options)
    if error is not None:
        raise error
    return output


def get_lines(text: str) -> list[str]:
    """Split multiline text into lines, without line terminators.

    A final trailing newline does not produce an empty last line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


split_lines = get_lines
