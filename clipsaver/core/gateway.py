"""
Gateway to the external extraction tool (yt-dlp or a compatible executable).

This is the only place that spawns the tool. Arguments are always passed as a
discrete argv list, never through a shell, so attacker-controlled URLs cannot
inject commands. Output is returned as text; interpreting it is the parser's job.
"""

import asyncio
import logging
from dataclasses import dataclass

from ..config import get_settings
from .errors import SpawnFailure, ToolFailure

logger = logging.getLogger(__name__)

_INSTALL_HINT = "Install yt-dlp (pip install yt-dlp) or set YTDLP_PATH to a compatible executable."

# Max chars of stderr kept in failure messages
_STDERR_SNIPPET = 500


async def _kill_and_reap(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass  # exited between the check and the signal
    await proc.wait()


@dataclass(frozen=True)
class ToolOutput:
    """Captured result of a successful tool run."""

    stdout: str
    stderr: str
    returncode: int


class ExtractionGateway:
    """Runs the extraction tool as an isolated child process."""

    def __init__(self, binary: str | None = None, timeout: float | None = None):
        settings = get_settings()
        self.binary = binary or settings.ytdlp_path
        self.timeout = timeout if timeout is not None else settings.tool_timeout

    async def invoke(self, args: list[str]) -> ToolOutput:
        """
        Run the tool with ``args`` and return its captured output.

        Raises SpawnFailure when the executable cannot be launched and
        ToolFailure on a non-zero exit or when the deadline expires.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error("Failed to spawn %s: %s", self.binary, e)
            raise SpawnFailure(f"Failed to spawn {self.binary}: {e}", hint=_INSTALL_HINT) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            await _kill_and_reap(proc)
            logger.warning("%s timed out after %ss (args=%s)", self.binary, self.timeout, args)
            raise ToolFailure(
                f"{self.binary} timed out after {self.timeout:g}s",
                returncode=proc.returncode,
                reason="timeout",
            )
        except BaseException:
            await _kill_and_reap(proc)
            raise

        out_text = stdout.decode("utf-8", errors="replace") if stdout else ""
        err_text = stderr.decode("utf-8", errors="replace").strip() if stderr else ""

        if proc.returncode != 0:
            snippet = (err_text[:_STDERR_SNIPPET] + "…") if len(err_text) > _STDERR_SNIPPET else err_text
            logger.warning("%s exited %s: %s", self.binary, proc.returncode, snippet)
            raise ToolFailure(
                f"{self.binary} failed: {snippet or 'Unknown error'}",
                stderr=err_text,
                returncode=proc.returncode,
            )

        return ToolOutput(stdout=out_text, stderr=err_text, returncode=proc.returncode)

    async def version(self) -> str | None:
        """Get the tool's version string, or None if it cannot be run."""
        try:
            output = await self.invoke(["--version"])
        except (SpawnFailure, ToolFailure):
            return None
        lines = output.stdout.strip().splitlines()
        return lines[0] if lines else None
