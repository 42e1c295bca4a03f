"""Running an ffmpeg process and following its stderr."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from .command import Command

_READ_SIZE = 4096


def scan_lines_or_cr(data: bytes, at_eof: bool) -> tuple[int, bytes | None]:
    """Split off the next line ending in ``\\n`` or ``\\r``.

    Returns how many bytes to consume and the line without its terminator,
    or ``(0, None)`` when more data is needed or nothing is left.
    """
    if at_eof and not data:
        return 0, None
    for i, byte in enumerate(data):
        if byte in (0x0A, 0x0D):
            return i + 1, bytes(data[:i])
    if at_eof:
        return len(data), bytes(data)
    return 0, None


class Runner:
    """Manages one ffmpeg process built from a command."""

    def __init__(self, command: Command) -> None:
        self.command = command
        self.output_path = command.output
        self.process: subprocess.Popen[bytes] | None = None

    def _started(self) -> subprocess.Popen[bytes]:
        if self.process is None:
            raise RuntimeError("process has not been started")
        return self.process

    def start(self) -> None:
        """Start the process with stderr captured and stdout discarded."""
        if self.process is not None:
            raise RuntimeError("process already started")
        options: dict[str, Any] = {}
        if sys.platform == "win32":
            options["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            # Its own process group, so cancel can signal the whole tree.
            options["start_new_session"] = True
        self.process = subprocess.Popen(
            self.command.argv(),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            **options,
        )

    def stderr_lines(self) -> Iterator[str]:
        """Yield stderr lines, split on either newline or carriage return."""
        stream = self._started().stderr
        if stream is None:
            return
        buffer = bytearray()
        at_eof = False
        while True:
            advance, token = scan_lines_or_cr(buffer, at_eof)
            if token is None:
                if at_eof:
                    return
                chunk = stream.read1(_READ_SIZE)  # type: ignore[attr-defined]
                if chunk:
                    buffer.extend(chunk)
                else:
                    at_eof = True
                continue
            del buffer[:advance]
            yield token.decode("utf-8", errors="replace")

    def wait(self) -> int:
        """Wait for the process to exit.

        Returns 0 on success and raises CalledProcessError otherwise.
        """
        process = self._started()
        returncode = process.wait()
        if process.stderr is not None:
            process.stderr.close()
        if returncode != 0:
            raise subprocess.CalledProcessError(returncode, process.args)
        return returncode

    def cancel(self) -> bool:
        """Ask the running process to stop with an interrupt.

        Returns False, doing nothing, when the process was never started or
        has already exited.
        """
        process = self.process
        if process is None or process.poll() is not None:
            return False
        if sys.platform == "win32":
            process.send_signal(signal.CTRL_BREAK_EVENT)
        else:
            try:
                os.killpg(process.pid, signal.SIGINT)
            except OSError:
                process.send_signal(signal.SIGINT)
        return True

    def cleanup_output(self) -> None:
        """Remove a partial output file; standard output is left alone."""
        if self.output_path in ("", "-"):
            return
        try:
            Path(self.output_path).unlink()
        except OSError:
            pass