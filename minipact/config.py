"""
Settings read from the environment.

Environment variables:
- MINIPACT_PACT_DIR: directory pact documents are written to
- MINIPACT_SPEC_VERSION: pact specification version recorded in documents
- MINIPACT_FETCH_TIMEOUT: seconds before the HTTP client gives up
- MINIPACT_LOG_LEVEL: logging level used by the command line
- PACT_BROKER_URL: broker base URL
- PACT_BROKER_TOKEN: bearer token for the broker
- PACT_BROKER_USERNAME / PACT_BROKER_PASSWORD: basic auth for the broker
- PACT_CONSUMER_VERSION (or APP_VERSION): version pacts are published under
- PACT_TAGS: comma separated tags applied after publishing
"""

import logging
import os


logger = logging.getLogger(__name__)

DEFAULT_SPEC_VERSION = '2.0.0'


def _get_float(environ, name):
    value = environ.get(name)
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError('{} must be a number, got {!r}'.format(name, value))


class Settings:

    def __init__(self, pact_dir=None, spec_version=DEFAULT_SPEC_VERSION,
                 fetch_timeout=None, log_level='WARNING', broker_url=None,
                 broker_token=None, broker_username=None, broker_password=None,
                 consumer_version=None, tags=None):
        self.pact_dir = pact_dir
        self.spec_version = spec_version
        self.fetch_timeout = fetch_timeout
        self.log_level = log_level
        self.broker_url = broker_url
        self.broker_token = broker_token
        self.broker_username = broker_username
        self.broker_password = broker_password
        self.consumer_version = consumer_version
        self.tags = tags or []

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ

        tags = environ.get('PACT_TAGS')
        settings = cls(
            pact_dir=environ.get('MINIPACT_PACT_DIR') or None,
            spec_version=environ.get('MINIPACT_SPEC_VERSION') or DEFAULT_SPEC_VERSION,
            fetch_timeout=_get_float(environ, 'MINIPACT_FETCH_TIMEOUT'),
            log_level=(environ.get('MINIPACT_LOG_LEVEL') or 'WARNING').upper(),
            broker_url=environ.get('PACT_BROKER_URL') or None,
            broker_token=environ.get('PACT_BROKER_TOKEN') or None,
            broker_username=environ.get('PACT_BROKER_USERNAME') or None,
            broker_password=environ.get('PACT_BROKER_PASSWORD') or None,
            consumer_version=(
                environ.get('PACT_CONSUMER_VERSION') or environ.get('APP_VERSION') or None),
            tags=[t.strip() for t in tags.split(',') if t.strip()] if tags else [],
        )
        if settings.broker_url and not (
                settings.broker_token or
                (settings.broker_username and settings.broker_password)):
            logger.warning('No pact broker authentication configured')
        return settings


def get_settings():
    return Settings.from_env()
