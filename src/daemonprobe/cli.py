"""CLI entry point using Click.

Two invocation forms are accepted::

    check_daemon -F <status log> -e <expire_minutes> -C <process_string>
    check_daemon <status log> <expire_minutes> <process_string>

Exactly one line is written to stdout and the exit code is the severity
(OK=0, WARNING=1, CRITICAL=2, UNKNOWN=3).
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import click

from daemonprobe import __version__
from daemonprobe.config import load_config
from daemonprobe.core.deadline import Deadline
from daemonprobe.core.evaluator import HealthEvaluator
from daemonprobe.errors import ProbeUsageError
from daemonprobe.types.evaluation import EvaluationInput, ProbeResult
from daemonprobe.types.severity import Severity
from daemonprobe.utilities.logger import setup_logging

PROGNAME = "check_daemon"

EPILOG = f"""\b
Example:
   {PROGNAME} -F /usr/local/nagios/var/status.log -e 5 -C /usr/local/nagios/bin/nagios
"""


def _usage_line(message: str) -> str:
    return f"{message.rstrip('.')}. Type '{PROGNAME} -h' for additional help"


class ProbeCommand(click.Command):
    """Command whose usage errors print one stdout line and exit UNKNOWN."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            click.echo(_usage_line(exc.format_message()))
            ctx.exit(Severity.UNKNOWN.exit_code)


@click.command(
    cls=ProbeCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.argument("legacy", nargs=-1, metavar="[LOGFILE EXPIRE_MINUTES PROCESS_STRING]")
@click.option("--filename", "-F", default=None, help="Name of the status log file to check")
@click.option("--expires", "-e", default=None,
              help="Minutes of age after which the status log is considered stale")
@click.option("--command", "-C", "process_string", default=None,
              help="Command to search for in the process table")
@click.option("--timeout", "-t", type=float, default=None,
              help="Seconds before the plugin times out (default: 10)")
@click.option("--config", "config_path", default=None,
              type=click.Path(dir_okay=False), help="YAML configuration file")
@click.option("--label", default=None, help="Name of the monitored daemon used in messages")
@click.option("--debug", is_flag=True, help="Enable debug logging on stderr")
@click.option("--version", "-V", is_flag=True, help="Print version information")
@click.pass_context
def main(
    ctx: click.Context,
    legacy: tuple[str, ...],
    filename: str | None,
    expires: str | None,
    process_string: str | None,
    timeout: float | None,
    config_path: str | None,
    label: str | None,
    debug: bool,
    version: bool,
) -> None:
    """Check that the monitoring daemon is running and updating its status log.

    The status log must have been updated within EXPIRE_MINUTES and the
    process listing must contain at least one line matching PROCESS_STRING.
    """
    if version:
        click.echo(f"{PROGNAME} v{__version__}")
        ctx.exit(Severity.OK.exit_code)

    started_at = time.monotonic()

    cli_args: dict[str, Any] = {}
    if timeout is not None:
        cli_args["timeout"] = timeout
    if label is not None:
        cli_args["label"] = label
    if debug:
        cli_args["debug"] = True
    config = load_config(cli_args=cli_args, config_path=config_path)
    setup_logging(debug=config.debug, json_output=config.log_json)
    deadline = Deadline(config.timeout, started_at=started_at)

    if legacy:
        filename = legacy[0]
        expires = legacy[1] if len(legacy) > 1 else None
        process_string = legacy[2] if len(legacy) > 2 else None

    try:
        request = EvaluationInput.from_cli(filename, expires, process_string)
    except ProbeUsageError as exc:
        _finish(ctx, ProbeResult(severity=exc.severity, message=_usage_line(str(exc))))
        return

    evaluator = HealthEvaluator(config)
    result = asyncio.run(evaluator.evaluate(request, deadline))
    _finish(ctx, result)


def _finish(ctx: click.Context, result: ProbeResult) -> None:
    click.echo(result.message)
    ctx.exit(result.exit_code)
