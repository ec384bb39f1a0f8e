from __future__ import annotations

import logging
import shlex
import subprocess
from typing import IO, Iterator, Protocol, Sequence, cast

from core.jobs.errors import ExecutionError

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 4096


class JobExecutor(Protocol):
    def execute(self, identifier: str) -> Iterator[bytes]:
        """Yield output chunks as the job produces them.

        Raises ExecutionError when the job cannot be launched, or after all
        output has been yielded when it exited unsuccessfully.
        """
        ...


class SubprocessExecutor:
    """Runs one fixed external command per job, merging stdout and stderr."""

    def __init__(self, command: str | Sequence[str]) -> None:
        args = shlex.split(command) if isinstance(command, str) else list(command)
        if not args:
            raise ValueError("command must not be empty")
        self._args = args

    def build_args(self, identifier: str) -> list[str]:
        return [arg.replace("{identifier}", identifier) for arg in self._args]

    def execute(self, identifier: str) -> Iterator[bytes]:
        args = self.build_args(identifier)
        try:
            proc = subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except (OSError, ValueError) as err:
            raise ExecutionError(f"could not launch {args[0]!r}: {err}") from err

        logger.debug("Launched %s (pid=%s) for %s", args, proc.pid, identifier)
        with proc:
            stdout = cast(IO[bytes], proc.stdout)
            while True:
                chunk = stdout.read1(READ_CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
            returncode = proc.wait()

        if returncode != 0:
            raise ExecutionError(f"{args[0]!r} exited with status {returncode}", returncode=returncode)
