"""
Consumer side contract verification.

``verify`` runs one interaction: it starts a MockService answering that
interaction, hands its base URI to the consumer's test body, tears the
service down and checks that every key declared in the interaction's body
shape came back. ``verify_pact`` does the same for every interaction of a
PactConfig and builds the pact document once all of them pass.

A run moves through::

    idle -> mock started -> request received -> asserted -> passed
                 |                  |               |
                 +------------------+---------------+--> failed
"""

import inspect
import logging

from .config import get_settings
from .exceptions import (
    FetchError, MiniPactException, MissingKeys, RequestNotReceived,
    UnexpectedRequest)
from .interaction import InteractionBuilder
from .pact import Pact
from .service import MockService


logger = logging.getLogger(__name__)

IDLE = 'idle'
MOCK_STARTED = 'mock started'
REQUEST_RECEIVED = 'request received'
ASSERTED = 'asserted'
PASSED = 'passed'
FAILED = 'failed'

TRANSITIONS = {
    IDLE: (MOCK_STARTED,),
    MOCK_STARTED: (REQUEST_RECEIVED, FAILED),
    REQUEST_RECEIVED: (ASSERTED, FAILED),
    ASSERTED: (PASSED, FAILED),
}

DEFAULT_REQUEST_TIMEOUT = 1.0


class VerificationResult:
    """The outcome of verifying one interaction."""

    def __init__(self, interaction):
        self.interaction = interaction
        self.state = IDLE
        self.mapping = None
        self.error = None
        self.pact = None

    def __repr__(self):
        return '<VerificationResult {!r}: {}>'.format(
            self.interaction.description, self.state)

    @property
    def passed(self):
        return self.state == PASSED

    def advance(self, state):
        if state not in TRANSITIONS.get(self.state, ()):
            raise MiniPactException(
                'cannot move from {} to {}'.format(self.state, state))
        logger.debug('%s: %s -> %s', self.interaction.description, self.state, state)
        self.state = state

    def fail(self, error):
        logger.warning('%s failed: %s', self.interaction.description, error)
        self.error = error
        self.advance(FAILED)

    def raise_for_failure(self):
        if self.error is not None:
            raise self.error


def assert_keys(interaction, keys):
    """
        Check that ``keys`` only names fields the interaction declares.

        Nested fields count in their dotted form, e.g. ``ids.id``.

        A test expecting a key its own contract does not declare is out of
        sync with that contract.
    """
    undeclared = set(keys) - set(interaction.body.keys())
    if undeclared:
        raise ValueError('keys not declared by {!r}: {}'.format(
            interaction.description, ', '.join(sorted(undeclared))))


def missing_keys(interaction, mapping, keys=None):
    if keys is None:
        keys = interaction.keys()
    else:
        assert_keys(interaction, keys)
    return set(keys) - set(mapping)


def verify(interaction, test_body, consumer=None, provider=None, keys=None,
           request_timeout=DEFAULT_REQUEST_TIMEOUT, require_request=True,
           pact_dir=None, specification_version=None):
    """
        Verify one interaction against the consumer's ``test_body``.

        ``test_body`` is called with the mock service base URI and must
        return the consumer's response mapping. ``keys`` restricts the check
        to a subset of the declared keys.

        Failures never raise: they are recorded on the returned result, see
        ``VerificationResult.raise_for_failure``. Exceptions other than
        FetchError propagate once the mock service is stopped.

        When ``consumer`` and ``provider`` are given, a passing run carries
        a Pact for the interaction, written to ``pact_dir`` (default: the
        MINIPACT_PACT_DIR setting) if set.
    """
    if keys is not None:
        assert_keys(interaction, keys)
    settings = get_settings()
    pact_dir = pact_dir or settings.pact_dir
    result = VerificationResult(interaction)

    with MockService([interaction]) as service:
        result.advance(MOCK_STARTED)
        try:
            mapping = test_body(service.base_uri)
        except FetchError as e:
            result.fail(e)
            return result
        service.wait_for_request(request_timeout)
        received, unexpected = list(service.received), list(service.unexpected)

    if unexpected:
        result.fail(UnexpectedRequest(unexpected))
        return result
    if require_request:
        if not received:
            result.fail(RequestNotReceived(
                'no request received for {} {}'.format(
                    interaction.method, interaction.path)))
            return result
    result.advance(REQUEST_RECEIVED)

    result.mapping = mapping
    missing = missing_keys(interaction, mapping, keys)
    result.advance(ASSERTED)
    if missing:
        result.fail(MissingKeys(missing))
        return result
    result.advance(PASSED)

    if consumer is not None and provider is not None:
        result.pact = Pact(
            consumer, provider, [interaction],
            specification_version=specification_version or settings.spec_version)
        if pact_dir:
            result.pact.write(pact_dir)
    return result


class PactConfig:
    """
    Everything needed to verify a consumer against one provider.

    ``test_body`` is called with the mock service base URI, and with the
    interaction as a second argument if it accepts one.
    """

    def __init__(self, consumer, provider, interactions=(), test_body=None,
                 pact_dir=None, specification_version=None,
                 request_timeout=DEFAULT_REQUEST_TIMEOUT):
        settings = get_settings()
        self.consumer = consumer
        self.provider = provider
        self.interactions = list(interactions)
        self.test_body = test_body
        self.pact_dir = pact_dir or settings.pact_dir
        self.specification_version = specification_version or settings.spec_version
        self.request_timeout = request_timeout

    def add_interaction(self, interaction):
        self.interactions.append(interaction)

    def given(self, provider_state, on_duplicate='error'):
        return InteractionBuilder(
            self.add_interaction, on_duplicate=on_duplicate).given(provider_state)

    def upon_receiving(self, description, on_duplicate='error'):
        return InteractionBuilder(
            self.add_interaction, on_duplicate=on_duplicate).upon_receiving(description)


class PactVerification:
    """The outcome of ``verify_pact``."""

    def __init__(self, results, pact=None):
        self.results = list(results)
        self.pact = pact

    @property
    def passed(self):
        return all(result.passed for result in self.results)

    @property
    def failures(self):
        return [result for result in self.results if not result.passed]

    def raise_for_failure(self):
        for result in self.failures:
            result.raise_for_failure()


def _bind(test_body, interaction):
    try:
        parameters = inspect.signature(test_body).parameters.values()
    except (TypeError, ValueError):
        return test_body
    positional = [
        p for p in parameters
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)]
    if len(positional) >= 2 or any(p.kind == p.VAR_POSITIONAL for p in positional):
        return lambda base_uri: test_body(base_uri, interaction)
    return test_body


def verify_pact(config):
    """
        Verify every interaction of ``config``.

        A failing interaction does not stop the others. The pact is built,
        and written when the config has a pact_dir, only if all pass.
    """
    if config.test_body is None:
        raise ValueError('PactConfig has no test_body')

    results = []
    for interaction in config.interactions:
        results.append(verify(
            interaction,
            _bind(config.test_body, interaction),
            request_timeout=config.request_timeout,
        ))

    verification = PactVerification(results)
    if verification.passed:
        verification.pact = Pact(
            config.consumer, config.provider, config.interactions,
            specification_version=config.specification_version)
        if config.pact_dir:
            verification.pact.write(config.pact_dir)
    else:
        logger.warning('%d of %d interactions between %s and %s failed',
                       len(verification.failures), len(results),
                       config.consumer, config.provider)
    return verification
