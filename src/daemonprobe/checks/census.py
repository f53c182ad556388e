"""Process census: count matching lines in a live process listing.

The listing command runs as a child process with stdout and stderr piped.
Both streams are drained by concurrent readers so that a child filling one
pipe can never block the parent while it waits on the other.
"""

from __future__ import annotations

import asyncio
import shlex

from daemonprobe.core.deadline import Deadline
from daemonprobe.errors import CensusSpawnError, ConfigurationError
from daemonprobe.types.evaluation import CensusResult
from daemonprobe.utilities.logger import get_logger

logger = get_logger(__name__)

READ_CHUNK = 64 * 1024
STDERR_CHUNK = 4096
SIGTERM_GRACE_SECONDS = 3.0


async def _count_matches(stream: asyncio.StreamReader | None, token: str) -> int:
    """Count lines containing ``token``.

    Reads fixed-size blocks and splits on newlines itself, so a listing line
    of any width is handled.
    """
    if stream is None:
        return 0
    count = 0
    pending = b""
    while True:
        chunk = await stream.read(READ_CHUNK)
        if not chunk:
            break
        *lines, pending = (pending + chunk).split(b"\n")
        count += sum(1 for line in lines if _line_matches(line, token))
    if pending and _line_matches(pending, token):
        count += 1
    return count


def _line_matches(line: bytes, token: str) -> bool:
    return token in line.decode("utf-8", errors="replace")


async def _drain_errors(stream: asyncio.StreamReader | None) -> bool:
    """Read stderr to EOF; report whether anything was written."""
    if stream is None:
        return False
    seen = False
    while True:
        chunk = await stream.read(STDERR_CHUNK)
        if not chunk:
            break
        seen = True
    return seen


async def _kill_process(proc: asyncio.subprocess.Process) -> None:
    """Kill a process with SIGTERM -> SIGKILL chain."""
    if proc.returncode is not None:
        return
    try:
        proc.terminate()
    except ProcessLookupError:
        return

    try:
        await asyncio.wait_for(proc.wait(), timeout=SIGTERM_GRACE_SECONDS)
    except asyncio.TimeoutError:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()


async def run_census(
    command: list[str],
    token: str,
    deadline: Deadline,
) -> CensusResult:
    """Run ``command`` and count stdout lines containing ``token``.

    Args:
        command: argv of the process listing command (no shell).
        token: Substring to look for; no anchoring, no case folding.
        deadline: Shared evaluation deadline.

    Returns:
        CensusResult with the match count, whether stderr had output and
        the child's exit status.

    Raises:
        CensusSpawnError: If the child cannot be started.
        ProbeTimeoutError: If the deadline expires before the child is done.
    """
    if not command:
        raise ConfigurationError("Process listing command is empty")
    command_text = shlex.join(command)
    deadline.check()

    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise CensusSpawnError(command_text, reason=exc.strerror or str(exc)) from exc

    logger.debug("census_spawned", command=command_text, pid=proc.pid)
    try:
        match_count, stderr_seen = await deadline.run(
            asyncio.gather(
                _count_matches(proc.stdout, token),
                _drain_errors(proc.stderr),
            )
        )
        exit_code = await deadline.run(proc.wait())
    except BaseException:
        # Timed out or cancelled: close the child down before propagating.
        await _kill_process(proc)
        raise

    result = CensusResult(
        match_count=match_count,
        anomaly_detected=stderr_seen,
        exit_code=exit_code,
    )
    if result.anomaly_detected:
        logger.warning("census_stderr_output", command=command_text)
    if result.abnormal_exit:
        logger.warning("census_abnormal_exit", command=command_text, exit_code=exit_code)
    logger.debug("census_complete", matches=match_count, exit_code=exit_code)
    return result


def split_command(command: str | list[str]) -> list[str]:
    """Normalize a configured command into argv form."""
    if isinstance(command, str):
        return shlex.split(command)
    return [str(part) for part in command]
