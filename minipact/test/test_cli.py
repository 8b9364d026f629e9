import pytest
import requests
import requests_mock
from click.testing import CliRunner

from ..cli import cli
from ..pact import Pact


PROVIDER_URL = 'http://provider/person'
BROKER_URL = 'http://broker'
PACT_URI = '{}/pacts/provider/PersonProvider/consumer/PersonConsumer/version/1.0.0'.format(
    BROKER_URL)
TAG_URI = '{}/pacticipants/PersonConsumer/versions/1.0.0/tags/{{}}'.format(BROKER_URL)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def pact_file(person, tmp_path):
    return Pact('PersonConsumer', 'PersonProvider', [person]).write(str(tmp_path))


def test_fetch_prints_the_mapping(runner):
    with requests_mock.Mocker() as m:
        m.get(PROVIDER_URL, json={'lastName': 'Smith', 'firstName': 'Mary', 'ids': {'id': 7}})
        result = runner.invoke(cli, ['fetch', PROVIDER_URL])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        'firstName: Mary',
        'ids: {"id": 7}',
        'ids.id: 7',
        'lastName: Smith',
    ]


def test_fetch_passes_the_timeout(runner):
    with requests_mock.Mocker() as m:
        m.get(PROVIDER_URL, json={})
        result = runner.invoke(cli, ['fetch', PROVIDER_URL, '--timeout', '3'])

        assert result.exit_code == 0, result.output
        assert m.last_request.timeout == 3.0


def test_fetch_connection_failed(runner):
    with requests_mock.Mocker() as m:
        m.get(PROVIDER_URL, exc=requests.ConnectionError)
        result = runner.invoke(cli, ['fetch', PROVIDER_URL])

    assert result.exit_code == 1
    assert 'could not reach' in result.output


def test_fetch_invalid_body(runner):
    with requests_mock.Mocker() as m:
        m.get(PROVIDER_URL, text='<html/>')
        result = runner.invoke(cli, ['--log-level', 'debug', 'fetch', PROVIDER_URL])

    assert result.exit_code == 1
    assert 'did not return JSON' in result.output


def test_publish(runner, pact_file):
    with requests_mock.Mocker() as m:
        m.put(PACT_URI, status_code=201)
        m.put(TAG_URI.format('main'), status_code=201)
        m.put(TAG_URI.format('prod'), status_code=201)
        result = runner.invoke(cli, [
            'publish', pact_file,
            '--broker-url', BROKER_URL,
            '--consumer-version', '1.0.0',
            '--tag', 'main', '--tag', 'prod',
        ])

        assert result.exit_code == 0, result.output
        assert [r.method for r in m.request_history] == ['PUT', 'PUT', 'PUT']
        assert m.request_history[0].json() == Pact.load(pact_file).to_dict()
    assert 'Published personconsumer-personprovider.json version 1.0.0' in result.output


def test_publish_from_environment(runner, pact_file, monkeypatch):
    monkeypatch.setenv('PACT_BROKER_URL', BROKER_URL)
    monkeypatch.setenv('PACT_BROKER_TOKEN', 's3cret')
    monkeypatch.setenv('PACT_CONSUMER_VERSION', '1.0.0')
    monkeypatch.setenv('PACT_TAGS', 'main')
    with requests_mock.Mocker() as m:
        m.put(PACT_URI, status_code=200)
        m.put(TAG_URI.format('main'), status_code=201)
        result = runner.invoke(cli, ['publish', pact_file])

        assert result.exit_code == 0, result.output
        assert m.call_count == 2
        assert m.request_history[0].headers['Authorization'] == 'Bearer s3cret'


def test_publish_refused(runner, pact_file):
    with requests_mock.Mocker() as m:
        m.put(PACT_URI, status_code=500, text='broken')
        result = runner.invoke(cli, [
            'publish', pact_file, '--broker-url', BROKER_URL, '--consumer-version', '1.0.0',
        ])

    assert result.exit_code == 1
    assert 'broker answered 500' in result.output


def test_publish_bad_pact(runner, tmp_path):
    path = tmp_path / 'broken.json'
    path.write_text('{"consumer": "PersonConsumer"}')

    result = runner.invoke(cli, [
        'publish', str(path), '--broker-url', BROKER_URL, '--consumer-version', '1.0.0',
    ])

    assert result.exit_code == 1
    assert 'key provider not found' in result.output


@pytest.mark.parametrize("interaction", [
    '"a request"',
    '{"description": "a request", "request": {"method": "FOO", "path": "/"}, "response": {"status": 200}}',
])
def test_publish_invalid_interaction(runner, tmp_path, interaction):
    path = tmp_path / 'broken.json'
    path.write_text(
        '{"consumer": "PersonConsumer", "provider": "PersonProvider", "interactions": [%s], '
        '"metadata": {"pactSpecification": {"version": "2.0.0"}}}' % interaction)

    result = runner.invoke(cli, [
        'publish', str(path), '--broker-url', BROKER_URL, '--consumer-version', '1.0.0',
    ])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert 'Error: invalid interaction' in result.output


def test_publish_requires_a_broker(runner, pact_file):
    result = runner.invoke(cli, ['publish', pact_file, '--consumer-version', '1.0.0'])

    assert result.exit_code == 2
    assert 'PACT_BROKER_URL' in result.output
