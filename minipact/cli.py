"""Command line for the consumer application and pact publication.

Usage:
    minipact fetch http://localhost:8080/person
    minipact publish pacts/consumer-provider.json --consumer-version 1.2.0 --tag main
"""

import logging
import sys

import click

from .broker import BrokerClient
from .client import fetch as fetch_mapping
from .config import get_settings
from .exceptions import BadPactFormat, FetchError, PublishError
from .pact import Pact


logger = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: MINIPACT_LOG_LEVEL or WARNING)")
@click.pass_context
def cli(ctx, log_level):
    """minipact - consumer driven contract testing."""
    settings = get_settings()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    ctx.obj = settings


@cli.command()
@click.argument("url")
@click.option("--timeout", type=float, default=None, help="Seconds to wait for the provider")
def fetch(url, timeout):
    """GET URL and print the response mapping."""
    try:
        mapping = fetch_mapping(url, timeout=timeout)
    except FetchError as e:
        raise click.ClickException(str(e))
    for key in sorted(mapping):
        click.echo("{}: {}".format(key, mapping[key]))


@cli.command()
@click.argument("pact_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--broker-url", default=None, help="Broker base URL (default: PACT_BROKER_URL)")
@click.option("--consumer-version", default=None, help="Consumer version (default: PACT_CONSUMER_VERSION)")
@click.option("--tag", "tags", multiple=True, help="Tag applied to the consumer version, repeatable")
@click.pass_obj
def publish(settings, pact_file, broker_url, consumer_version, tags):
    """Publish PACT_FILE to the broker."""
    broker_url = broker_url or settings.broker_url
    consumer_version = consumer_version or settings.consumer_version
    tags = list(tags) or settings.tags
    if not broker_url:
        raise click.UsageError("--broker-url or PACT_BROKER_URL is required")
    if not consumer_version:
        raise click.UsageError("--consumer-version or PACT_CONSUMER_VERSION is required")

    try:
        pact = Pact.load(pact_file)
        with BrokerClient(
                broker_url,
                token=settings.broker_token,
                username=settings.broker_username,
                password=settings.broker_password) as broker:
            broker.publish(pact, consumer_version)
            for tag in tags:
                broker.tag(pact.consumer, consumer_version, tag)
    except (BadPactFormat, PublishError) as e:
        raise click.ClickException(str(e))
    click.echo("Published {} version {}".format(pact.filename, consumer_version))


def main():
    cli()
