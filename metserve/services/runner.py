"""Bounded external command execution.

run_command() never raises for the failures a diagnostic tool can produce:
a missing binary, a non-zero exit or a hung process all come back as a
CommandResult with ok=False.
"""

import asyncio
import os
import signal
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured output of one external command."""

    ok: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int | None = None
    timed_out: bool = False

    @property
    def combined(self) -> str:
        """stdout followed by stderr, the text fed to parsers."""
        return self.stdout + self.stderr


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


def _kill(proc: asyncio.subprocess.Process) -> None:
    """SIGKILL the process group of *proc*, ignoring processes that already exited."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        try:
            proc.kill()
        except ProcessLookupError:
            pass


async def run_command(argv: Sequence[str], timeout: float = 5.0) -> CommandResult:
    """Run *argv* and capture its output, killing it after *timeout* seconds.

    Args:
        argv: Program and arguments. The program is resolved on PATH.
        timeout: Wall-clock budget in seconds before SIGKILL.

    Returns:
        CommandResult with ok=True only for a zero exit status. On timeout the
        output captured before the kill is kept.
    """
    cmd = " ".join(argv)
    log = logger.bind(command=cmd)
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,  # own process group, so children die with it
        )
    except OSError as e:
        log.debug(f"Could not launch: {e}")
        return CommandResult(ok=False)

    loop = asyncio.get_running_loop()
    timed_out = False

    def _on_timeout() -> None:
        nonlocal timed_out
        timed_out = True
        log.warning(f"Exceeded {timeout}s, killing pid={proc.pid}")
        _kill(proc)

    timer = loop.call_later(timeout, _on_timeout)
    try:
        stdout, stderr = await proc.communicate()
    finally:
        timer.cancel()
        if proc.returncode is None:
            # Cancelled while waiting: do not leave an orphan behind
            _kill(proc)
            await proc.wait()

    returncode = proc.returncode
    ok = returncode == 0 and not timed_out
    if not ok:
        log.debug(f"Finished with returncode={returncode} timed_out={timed_out}")

    return CommandResult(
        ok=ok,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        returncode=returncode,
        timed_out=timed_out,
    )
