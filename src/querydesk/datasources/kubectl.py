"""
kubectl runner for native cluster commands.

One process per call; stdout and stderr are buffered in full. The child is
killed when the timeout expires.
"""
from __future__ import annotations

import json
import subprocess
from typing import Any, Optional, Sequence

from querydesk.common.contracts import CommandResult
from querydesk.common.errors import (
    BackendExecutionError,
    ExecutionTimeoutError,
    ToolSpawnError,
)
from querydesk.common.logger import get_logger
from querydesk.common.settings import Settings, settings as default_settings

logger = get_logger("kubectl")


class KubectlRunner:
    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def run(self, verb: str, args: Sequence[str]) -> CommandResult:
        argv = [self.config.kubectl_binary, verb, *args]
        timeout = self.config.command_timeout_sec
        logger.info("Spawning kubectl", extra={"verb": verb, "arg_count": len(args)})
        # Pod logs are arbitrary bytes; undecodable output is replaced, not fatal.
        try:
            completed = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutionTimeoutError(f"kubectl {verb} timed out after {timeout} seconds.") from e
        except OSError as e:
            raise ToolSpawnError(f"Failed to execute kubectl: {e.strerror or e}") from e

        return CommandResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def parse_command_output(result: CommandResult) -> Any:
    """Turns a finished command into a native result for the normalizer.

    JSON output (``-o json``) is decoded; anything else is returned as text.

    Raises:
        BackendExecutionError: If the tool exited non-zero.
    """
    if result.exit_code != 0:
        detail = (result.stderr or result.stdout).strip()
        raise BackendExecutionError(f"kubectl command failed: {detail}")

    output = result.stdout.strip()
    if output.startswith("{") or output.startswith("["):
        try:
            return json.loads(output)
        except ValueError:
            return output
    return output
