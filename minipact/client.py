import json
import logging

import requests

from .config import get_settings
from .exceptions import ConnectionFailed, InvalidBody


logger = logging.getLogger(__name__)

CLIENT_HEADERS = {
    'Accept': 'application/json',
}


def _render(value):
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True)


def flatten(body, prefix=''):
    """
        Map a JSON object to a dict of strings.

        Strings are kept as they are, every other value is rendered as JSON.
        Nested objects are kept under their own key and also contribute their
        keys in dotted form, e.g. ``{'ids': {'id': 1}}`` gives ``ids`` and
        ``ids.id``.
    """
    mapping = {}
    for key, value in body.items():
        name = prefix + key
        mapping[name] = _render(value)
        if isinstance(value, dict):
            mapping.update(flatten(value, prefix=name + '.'))
    return mapping


def fetch(url, timeout=None, session=None):
    """
        GET ``url`` and return its JSON object body as a flat mapping.

        ``timeout`` falls back to the MINIPACT_FETCH_TIMEOUT setting; when
        neither is set the call blocks as long as the transport does.
        Failures are never retried.
    """
    if timeout is None:
        timeout = get_settings().fetch_timeout
    session = session or requests

    logger.debug('GET %s (timeout=%s)', url, timeout)
    try:
        response = session.get(url, headers=CLIENT_HEADERS, timeout=timeout)
    except (requests.ConnectionError, requests.Timeout) as e:
        raise ConnectionFailed('could not reach {}: {}'.format(url, e)) from e

    try:
        body = response.json()
    except ValueError as e:
        raise InvalidBody('{} did not return JSON: {}'.format(url, e)) from e
    if not isinstance(body, dict):
        raise InvalidBody('{} returned {} instead of a JSON object'.format(
            url, type(body).__name__))

    logger.debug('%s answered %s with keys %s', url, response.status_code, sorted(body))
    return flatten(body)
