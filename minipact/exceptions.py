"""
MiniPact exception classes
"""


class MiniPactException(Exception):
    """
    Base MiniPact exception.
    """
    pass


class MockServiceException(MiniPactException):
    """
    Raised by MockService.
    """
    pass


class BadPactFormat(MiniPactException):
    """
    Raised when a pact document or body shape cannot be read.
    """
    pass


class DuplicateFieldError(MiniPactException):
    """
    Raised when a body field is declared twice under the "error" policy.
    """

    def __init__(self, name):
        super().__init__('field {!r} is already declared'.format(name))
        self.name = name


class FetchError(MiniPactException):
    """
    Base class for errors raised by the HTTP client.
    """
    pass


class ConnectionFailed(FetchError):
    """
    The provider could not be reached.
    """
    pass


class InvalidBody(FetchError):
    """
    The response body is not a JSON object.
    """
    pass


class VerificationError(MiniPactException):
    """
    Base class for contract assertion failures.
    """
    pass


class MissingKeys(VerificationError):
    """
    Declared body keys were absent from the consumer's result.
    """

    def __init__(self, missing):
        self.missing = frozenset(missing)
        super().__init__(
            'missing keys: {}'.format(', '.join(sorted(self.missing))))


class RequestNotReceived(VerificationError):
    """
    The mock service was never called for the interaction.
    """
    pass


class UnexpectedRequest(VerificationError):
    """
    The mock service received requests that match no interaction.
    """

    def __init__(self, requests):
        self.requests = list(requests)
        super().__init__('unexpected requests: {}'.format(
            ', '.join('{} {}'.format(m, p) for m, p in self.requests)))


class PublishError(MiniPactException):
    """
    The broker refused or never received a pact.
    """

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code
