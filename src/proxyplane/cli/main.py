"""ProxyPlane CLI - proxyplane command."""

from pathlib import Path

import click

from proxyplane.cli.describe import describe_command
from proxyplane.config import load_config
from proxyplane.core.errors import ConfigError
from proxyplane.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="proxyplane")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of .proxyplane/config.yaml",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_file: Path | None) -> None:
    """ProxyPlane - inspect and build access-interceptor proxies."""
    try:
        config = load_config(config_file=config_file)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config

    if verbose:
        configure_logging(config=config.logging.model_copy(update={"level": "DEBUG"}))
    else:
        configure_logging(config=config.logging)


cli.add_command(describe_command, name="describe")


if __name__ == "__main__":
    cli()
