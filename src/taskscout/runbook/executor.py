"""Process execution seam for runbook steps.

The engine never spawns processes itself. It calls a ``ProcessExecutor``,
which tests replace with a recording fake. ``SubprocessExecutor`` is the real
implementation: each command runs through the shell in its own session, so
a timeout or ``cancel()`` can kill the whole process group (the shell and
everything it started) and reap it before control returns.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessOutcome:
    """What one process run produced.

    Attributes:
        exit_code: Exit status, or None when the process was killed.
        output: Combined stdout and stderr.
        duration: Wall-clock seconds.
        timed_out: True when the timeout expired and the process was killed.
    """

    exit_code: int | None
    output: str = ""
    duration: float = 0.0
    timed_out: bool = False


class ProcessExecutor(Protocol):
    """Anything that can run a shell command for the runbook engine."""

    def run(
        self,
        command: str,
        working_dir: str | Path | None,
        env: Mapping[str, str],
        timeout: float | None,
    ) -> ProcessOutcome: ...

    def cancel(self) -> None: ...


class SubprocessExecutor:
    """Runs commands with ``subprocess`` through the system shell.

    ``env`` entries are layered over the current environment. Output is
    captured, not streamed.
    """

    def __init__(self, shell: bool = True) -> None:
        self.shell = shell
        self._lock = threading.Lock()
        self._process: subprocess.Popen[str] | None = None

    def run(
        self,
        command: str,
        working_dir: str | Path | None,
        env: Mapping[str, str],
        timeout: float | None,
    ) -> ProcessOutcome:
        merged_env = {**os.environ, **env}
        started = time.monotonic()
        process = subprocess.Popen(
            command,
            shell=self.shell,
            cwd=working_dir or None,
            env=merged_env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            start_new_session=os.name == "posix",
        )
        with self._lock:
            self._process = process
        try:
            output, _ = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("Command timed out after %ss: %s", timeout, command)
            self._kill(process)
            output, _ = process.communicate()
            return ProcessOutcome(
                exit_code=None,
                output=output or "",
                duration=time.monotonic() - started,
                timed_out=True,
            )
        except BaseException:
            # Interrupted while waiting: the child has its own session, so it
            # never sees Ctrl-C and must be killed here.
            self._kill(process)
            process.wait()
            raise
        finally:
            with self._lock:
                self._process = None
        return ProcessOutcome(
            exit_code=process.returncode,
            output=output or "",
            duration=time.monotonic() - started,
        )

    def cancel(self) -> None:
        """Kill the running command's process group, if any."""
        with self._lock:
            process = self._process
        if process is not None and process.poll() is None:
            self._kill(process)

    @staticmethod
    def _kill(process: subprocess.Popen[str]) -> None:
        if os.name == "posix":
            try:
                os.killpg(process.pid, signal.SIGKILL)
            except ProcessLookupError:
                return
        else:
            process.kill()
