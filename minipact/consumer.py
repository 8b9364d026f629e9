"""Provides API for managing service consumers"""
from .verifier import PactConfig


class Consumer:

    def __init__(self, name, config_cls=PactConfig):
        self.name = name
        self.config_cls = config_cls

    def has_pact_with(self, provider, test_body=None, **kwargs):
        return self.config_cls(
            consumer=self.name,
            provider=provider,
            test_body=test_body,
            **kwargs)
