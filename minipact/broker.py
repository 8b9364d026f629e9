import logging
from urllib.parse import quote

import requests

from .exceptions import PublishError


logger = logging.getLogger(__name__)


CLIENT_HEADERS = {
    'Accept': 'application/hal+json, application/json',
    'Content-Type': 'application/json',
}


class BrokerClient(requests.Session):
    """
    Publishes pacts to a pact broker.

    Authenticates with ``token`` when given, with ``username`` and
    ``password`` otherwise. Nothing is retried: a transport failure or a
    non-2xx answer raises PublishError.
    """

    def __init__(self, base_uri, token=None, username=None, password=None,
                 *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.base_uri = base_uri.rstrip('/')
        self.headers.update(CLIENT_HEADERS)
        if token:
            self.headers['Authorization'] = 'Bearer {}'.format(token)
        elif username and password:
            self.auth = (username, password)

    def _put(self, path, data=None):
        url = '{}{}'.format(self.base_uri, path)
        logger.debug('PUT %s', url)
        try:
            response = self.put(url, data=data)
        except requests.RequestException as e:
            raise PublishError('could not reach broker at {}: {}'.format(url, e)) from e
        if not 200 <= response.status_code < 300:
            raise PublishError(
                'broker answered {} for {}: {}'.format(
                    response.status_code, url, response.text),
                status_code=response.status_code)
        return response

    def publish(self, pact, consumer_version):
        response = self._put(
            '/pacts/provider/{}/consumer/{}/version/{}'.format(
                quote(pact.provider, safe=''),
                quote(pact.consumer, safe=''),
                quote(consumer_version, safe='')),
            data=pact.to_json())
        logger.info('Published pact between %s and %s version %s',
                    pact.consumer, pact.provider, consumer_version)
        return response

    def tag(self, pacticipant, version, tag):
        return self._put(
            '/pacticipants/{}/versions/{}/tags/{}'.format(
                quote(pacticipant, safe=''),
                quote(version, safe=''),
                quote(tag, safe='')))
