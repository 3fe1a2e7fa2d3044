"""Command execution using invoke."""

from pathlib import Path

from invoke import Context, Result
from invoke.exceptions import CommandTimedOut

from bumpcat.core.log import logger


class Runner(Context):
    """invoke.Context with a single execute() entry point.

    Output is captured rather than echoed, optionally written to a log
    file, and replayed through the logger at the requested level.
    """

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        log_file: Path | None = None,
        log_level: str | None = None,
        check: bool = True,
        env: dict[str, str] | None = None,
    ) -> Result:
        """Execute a shell command.

        Args:
            command: Command string to execute
            cwd: Working directory for command execution
            timeout: Maximum execution time in seconds; a timed out
                command returns with exited == -1
            log_file: Path to write combined stdout/stderr output
            log_level: Level to replay output lines at
            check: If True, raise on non-zero exit code
            env: Extra environment variables

        Returns:
            invoke.Result with stdout, stderr, exited (return code)

        Raises:
            invoke.UnexpectedExit: If check=True and command returns
                non-zero
        """
        kwargs = {
            "hide": True,
            "warn": not check,
            "in_stream": False,
        }
        if timeout:
            kwargs["timeout"] = timeout
        if env:
            kwargs["env"] = env

        logger.debug("$ {command}", command=command,
                     cwd=str(cwd) if cwd else None)

        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            result = e.result
            result.exited = -1

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            log_file.write_text(result.stdout + result.stderr)

        if log_level:
            for line in (result.stdout + result.stderr).splitlines():
                # Output may contain braces; keep it out of the template
                logger.log(log_level, "{line}", line=line.rstrip())

        return result
