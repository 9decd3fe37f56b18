"""maxreport: run MaxCDN API reports from the command line."""
from __future__ import annotations

import logging
import sys

import click

from maxreport.client import MaxCDNClient
from maxreport.config import DEFAULT_CONFIG_PATH, Config, FileConfig, load_config, resolve_config
from maxreport.errors import ConfigError, MaxReportError
from maxreport.logging import configure_logging, set_redaction_secrets
from maxreport.reports import GRANULARITIES, Report, run_report, select_report

logger = logging.getLogger(__name__)

EPILOG = """\b
Notes:

\b
    'alias', 'token' and/or 'secret' can be set by exporting them to
    your environment as ALIAS, TOKEN and/or SECRET.

\b
    They can also be set in a YAML configuration via the --config
    option. 'host' can be set via configuration, but not environment.

\b
    Precedence is argument > environment > configuration.

\b
    Sample configuration:

\b
    ---
    alias: YOUR_ALIAS
    token: YOUR_TOKEN
    secret: YOUR_SECRET
"""


def _load_file_config(path: str) -> FileConfig:
    try:
        return load_config(path)
    except ConfigError as exc:
        logger.warning("ignoring config file: %s", exc)
        return FileConfig()


def _run(ctx: click.Context, report: Report) -> None:
    config: Config = ctx.obj
    problems = config.validate()
    if problems:
        click.echo(f"argument error:\n{problems}")
        click.echo(ctx.find_root().get_help())
        ctx.exit(2)

    client = MaxCDNClient(config)
    try:
        output = run_report(client, report)
    except MaxReportError as exc:
        logger.debug("report failed", exc_info=exc)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(output)


# ---------------------------------------------------------------------------
# CLI root
# ---------------------------------------------------------------------------

@click.group(epilog=EPILOG)
@click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_PATH, show_default=True,
              help="yaml file containing all required args")
@click.option("--alias", "-a", default=None, help="[required] consumer alias")
@click.option("--token", "-t", default=None, help="[required] consumer token")
@click.option("--secret", "-s", default=None, help="[required] consumer secret")
@click.option("--host", "-H", default=None, help="override default API host")
@click.option("--verbose", is_flag=True, help="display verbose http transport information")
@click.version_option(package_name="maxreport")
@click.pass_context
def cli(ctx, config_path, alias, token, secret, host, verbose):
    """Run MaxCDN API Reports."""
    configure_logging(verbose=verbose)
    file_config = _load_file_config(config_path)
    cfg = resolve_config(
        file_config,
        {"alias": alias, "token": token, "secret": secret, "host": host, "verbose": verbose},
    )
    set_redaction_secrets([cfg.token, cfg.secret])
    ctx.obj = cfg


# ---------------------------------------------------------------------------
# Report commands
# ---------------------------------------------------------------------------

@cli.command("stats")
@click.option("--from", "date_from", default=None, help="report start date (YYYY-MM-DD)")
@click.option("--to", "date_to", default=None, help="report end date (YYYY-MM-DD)")
@click.option("--type", "-t", "report_type", type=click.Choice(GRANULARITIES), default=None,
              help="report type: hourly, daily, monthly")
@click.pass_context
def stats(ctx, date_from, date_to, report_type):
    """Gets the total usage statistics for your account.

    The report is broken up by --type when given; otherwise the request
    returns the total usage on your account.
    """
    _run(ctx, select_report("stats", report_type, date_from, date_to))


@cli.command("popular")
@click.option("--from", "date_from", default=None, help="report start date (YYYY-MM-DD)")
@click.option("--to", "date_to", default=None, help="report end date (YYYY-MM-DD)")
@click.option("--top", "-t", type=click.IntRange(min=0), default=0, show_default=True,
              help="show top N results, zero shows all")
@click.pass_context
def popular(ctx, date_from, date_to, top):
    """Gets the most popularly requested files for your account."""
    _run(ctx, select_report("popular", None, date_from, date_to, top))


if __name__ == "__main__":
    cli()
