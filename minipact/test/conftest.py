import pytest

from ..interaction import InteractionBuilder, ShapeBuilder


ENV_VARS = (
    'MINIPACT_PACT_DIR', 'MINIPACT_SPEC_VERSION', 'MINIPACT_FETCH_TIMEOUT',
    'MINIPACT_LOG_LEVEL', 'PACT_BROKER_URL', 'PACT_BROKER_TOKEN',
    'PACT_BROKER_USERNAME', 'PACT_BROKER_PASSWORD', 'PACT_CONSUMER_VERSION',
    'APP_VERSION', 'PACT_TAGS',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def person():
    return (InteractionBuilder()
            .upon_receiving('a request for a person')
            .with_request('GET', '/person')
            .will_respond_with(200)
            .string_type('firstName')
            .string_type('lastName')
            .number_type('age')
            .object('ids', ShapeBuilder().integer_type('id').uuid('uuid'))
            .build())


@pytest.fixture
def address():
    return (InteractionBuilder()
            .upon_receiving('a request for an address')
            .with_request('GET', '/address')
            .string_type('street')
            .integer_type('number')
            .build())
