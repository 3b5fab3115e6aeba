import json
import logging
import os

import click
from rich.table import Table

from databootstrap import __version__, config

from .console import console


def _setup_cli_debug():
    from databootstrap.logging.setup import setup_logging_for_cli

    config.DEBUG = True
    os.environ["DEBUG"] = "1"

    setup_logging_for_cli(logging.DEBUG)


@click.group(
    name="databootstrap",
    help="Run the data bootstrap custom resource provider outside of AWS Lambda",
)
@click.version_option(version=__version__, message="%(version)s")
@click.option("--debug", is_flag=True, help="Enable CLI debugging mode")
def databootstrap(debug):
    if debug:
        _setup_cli_debug()


@databootstrap.command(name="invoke", help="Handle the lifecycle event stored in EVENT_FILE and print the result")
@click.argument("event_file", type=click.File("r"))
@click.option("--region", type=str, help="AWS region of the bootstrapped resources")
@click.option("--endpoint-url", type=str, help="Custom AWS endpoint, e.g. http://localhost:4566")
def cmd_invoke(event_file, region, endpoint_url):
    from databootstrap.aws.connect import ClientFactory
    from databootstrap.handler import handle_event
    from databootstrap.services.custom_resources.exceptions import BootstrapError
    from databootstrap.services.providers import create_dispatcher

    if not config.DEBUG:
        from databootstrap.logging.setup import setup_logging_for_cli

        setup_logging_for_cli(logging.INFO)

    try:
        payload = json.load(event_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{event_file.name} is not a valid JSON document: {e}")

    dispatcher = create_dispatcher(ClientFactory(region_name=region, endpoint_url=endpoint_url))
    try:
        result = handle_event(payload, dispatcher)
    except BootstrapError as e:
        raise click.ClickException(str(e))

    click.echo(json.dumps(result, indent=2, default=str))


@databootstrap.command(name="config", help="Print the current configuration")
@click.option("--format", "format_", type=click.Choice(["table", "plain", "json"]), default="table")
def cmd_config(format_):
    values = {name: getattr(config, name, None) for name in config.CONFIG_ENV_VARS}

    if format_ == "json":
        click.echo(json.dumps(values, default=str))
    elif format_ == "plain":
        for name, value in values.items():
            click.echo(f"{name}={value}")
    else:
        table = Table(title="databootstrap configuration")
        table.add_column("Key")
        table.add_column("Value")
        for name, value in values.items():
            table.add_row(name, str(value))
        console.print(table)
