"""
minipact

A consumer driven contract testing library.
"""

from .client import fetch
from .consumer import Consumer
from .fields import Integer, Number, Object, String, Uuid
from .interaction import Interaction, InteractionBuilder, ShapeBuilder
from .pact import Pact
from .verifier import PactConfig, verify, verify_pact
from .version import __version__


__all__ = [
    'Consumer', 'Interaction', 'InteractionBuilder', 'ShapeBuilder', 'Pact',
    'PactConfig', 'verify', 'verify_pact', 'fetch',
    'String', 'Number', 'Integer', 'Uuid', 'Object', '__version__',
]
