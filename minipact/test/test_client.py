import json

import pytest
import requests
import requests_mock

from ..client import CLIENT_HEADERS, fetch, flatten
from ..exceptions import ConnectionFailed, InvalidBody


TEST_URL = 'mock://provider/person'

PERSON = {
    'firstName': 'Mary',
    'lastName': 'Smith',
    'age': 42,
    'ids': {'id': 7, 'uuid': '5cf1ab6a-8a1e-4b3a-9c60-0a2b2a4b3c2d'},
}


@pytest.fixture
def session():
    return requests.Session()


@pytest.fixture
def mock_request(session):
    adapter = requests_mock.Adapter()
    session.mount('mock', adapter)
    return adapter


def test_flatten():
    assert flatten(PERSON) == {
        'firstName': 'Mary',
        'lastName': 'Smith',
        'age': '42',
        'ids': json.dumps(PERSON['ids'], sort_keys=True),
        'ids.id': '7',
        'ids.uuid': '5cf1ab6a-8a1e-4b3a-9c60-0a2b2a4b3c2d',
    }


def test_flatten_renders_json_values():
    assert flatten({'a': None, 'b': True, 'c': [1, 2]}) == {
        'a': 'null',
        'b': 'true',
        'c': '[1, 2]',
    }


def test_fetch(session, mock_request):
    mock_request.register_uri('GET', TEST_URL, json=PERSON)

    mapping = fetch(TEST_URL, session=session)

    assert set(mapping) == {'firstName', 'lastName', 'age', 'ids', 'ids.id', 'ids.uuid'}
    assert mapping['firstName'] == 'Mary'
    assert mock_request.call_count == 1
    for header in CLIENT_HEADERS.items():
        assert header in mock_request.last_request.headers.items()


def test_fetch_ignores_status(session, mock_request):
    mock_request.register_uri('GET', TEST_URL, json={'message': 'gone'}, status_code=404)

    assert fetch(TEST_URL, session=session) == {'message': 'gone'}


@pytest.mark.parametrize("exc", [
    requests.ConnectionError,
    requests.exceptions.ConnectTimeout,
    requests.exceptions.ReadTimeout,
])
def test_fetch_connection_failed(session, mock_request, exc):
    mock_request.register_uri('GET', TEST_URL, exc=exc)

    with pytest.raises(ConnectionFailed):
        fetch(TEST_URL, session=session)
    assert mock_request.call_count == 1


def test_fetch_unreachable_url():
    with pytest.raises(ConnectionFailed):
        fetch('http://127.0.0.1:1/person', timeout=2)


@pytest.mark.parametrize("kwargs", [
    {'text': 'not json'},
    {'text': ''},
    {'json': [PERSON]},
    {'json': 'Mary'},
])
def test_fetch_invalid_body(session, mock_request, kwargs):
    mock_request.register_uri('GET', TEST_URL, **kwargs)

    with pytest.raises(InvalidBody):
        fetch(TEST_URL, session=session)


def test_fetch_timeout_from_settings(monkeypatch):
    monkeypatch.setenv('MINIPACT_FETCH_TIMEOUT', '2.5')
    with requests_mock.Mocker() as m:
        m.get('http://provider/person', json=PERSON)
        fetch('http://provider/person')

        assert m.last_request.timeout == 2.5


def test_fetch_explicit_timeout_wins(monkeypatch):
    monkeypatch.setenv('MINIPACT_FETCH_TIMEOUT', '2.5')
    with requests_mock.Mocker() as m:
        m.get('http://provider/person', json=PERSON)
        fetch('http://provider/person', timeout=1)

        assert m.last_request.timeout == 1
