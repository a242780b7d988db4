"""External command execution"""

import logging
import re
import subprocess
from dataclasses import dataclass
from typing import List

from ..api.exceptions import InternalError, InternalRuntimeError
from ..constants import COMMAND_TIMEOUT

OUTPUT_ENCODING = "iso-8859-1"
LINE_SEPARATOR = "\r\n"

_TOKEN_PATTERN = re.compile(r'"([^"]*)"?|(\S+)')

logger = logging.getLogger(__name__)


def split_command(command: str) -> List[str]:
    """
    Split a command line into program and arguments

    Text in double quotes forms one argument; everything else is split at
    blanks. Backslashes are kept as they are.

    Args:
        command: Command line, e.g. ``"C:\\tools\\ver.exe" --short``

    Returns:
        Argument list
    """
    arguments = [quoted or plain for quoted, plain in _TOKEN_PATTERN.findall(command)]
    return [a for a in arguments if a]


def join_lines(data: bytes) -> str:
    """Decode process output; every line is terminated by CRLF"""
    text = data.decode(OUTPUT_ENCODING) if data else ""
    return "".join(line + LINE_SEPARATOR for line in text.splitlines())


@dataclass
class CommandResult:
    """Outcome of an external command"""
    return_code: int
    output: str
    error: str

    @property
    def success(self) -> bool:
        return self.return_code == 0


class CommandExecutor:
    """Runs an external program with a timeout"""

    def __init__(self, command: str, timeout: float = COMMAND_TIMEOUT):
        """
        Args:
            command: Command line (program in quotes, then arguments)
            timeout: Seconds to wait for the program
        """
        self.command = command
        self.timeout = timeout

    def execute(self) -> CommandResult:
        """
        Run the command and capture its output

        Returns:
            Exit code with stdout and stderr

        Raises:
            InternalError: The program cannot be started
            InternalRuntimeError: The program did not finish within the timeout
        """
        arguments = split_command(self.command)
        if not arguments:
            raise InternalError("Empty command")

        logger.debug(f"Executing: {arguments}")
        try:
            completed = subprocess.run(
                arguments,
                capture_output=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise InternalRuntimeError(
                f"{self.command} timed out. This might be because the specified program did not terminate."
            ) from e
        except OSError as e:
            raise InternalError(f"{self.command} could not be started: {e}") from e

        return CommandResult(
            return_code=completed.returncode,
            output=join_lines(completed.stdout),
            error=join_lines(completed.stderr)
        )
