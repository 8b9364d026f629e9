import json
import logging
import os

from .config import DEFAULT_SPEC_VERSION
from .exceptions import BadPactFormat
from .interaction import Interaction
from .version import __version__


logger = logging.getLogger(__name__)


def get_and_assert_key(document, key):
    """
        Walk ``document`` along the dotted ``key``.

        Raises BadPactFormat naming the first missing part.
    """
    ret, path = document, ''
    for k in key.split('.'):
        try:
            k = int(k)
        except ValueError:
            pass
        path += '%s%s' % ('.' if path else '', k)
        try:
            ret = ret[k]
        except (KeyError, IndexError, TypeError):
            raise BadPactFormat('key %s not found' % path)
    return ret


class Pact:
    """
    A contract between one consumer and one provider.

    Documents are written as JSON, keyed by consumer and provider name: a
    later run for the same pair replaces the earlier file.
    """

    def __init__(self, consumer, provider, interactions=(),
                 specification_version=DEFAULT_SPEC_VERSION):
        self.consumer = consumer
        self.provider = provider
        self.interactions = tuple(interactions)
        self.specification_version = specification_version

    def __eq__(self, other):
        return isinstance(other, Pact) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return 'Pact({!r}, {!r}, {} interactions)'.format(
            self.consumer, self.provider, len(self.interactions))

    @property
    def filename(self):
        return '{}-{}.json'.format(
            self.consumer, self.provider).lower().replace(' ', '-')

    def to_dict(self):
        return {
            'consumer': self.consumer,
            'provider': self.provider,
            'interactions': [i.to_dict() for i in self.interactions],
            'metadata': {
                'pactSpecification': {
                    'version': self.specification_version,
                },
                'minipact': {
                    'version': __version__,
                },
            },
        }

    def to_json(self):
        return json.dumps(self.to_dict(), indent=2, sort_keys=True)

    @classmethod
    def from_dict(cls, document):
        consumer = get_and_assert_key(document, 'consumer')
        provider = get_and_assert_key(document, 'provider')
        interactions = get_and_assert_key(document, 'interactions')
        if not isinstance(interactions, list):
            raise BadPactFormat('interactions must be a list, got {!r}'.format(interactions))
        return cls(
            consumer=consumer,
            provider=provider,
            interactions=[Interaction.from_dict(i) for i in interactions],
            specification_version=get_and_assert_key(
                document, 'metadata.pactSpecification.version'),
        )

    @classmethod
    def from_json(cls, text):
        try:
            document = json.loads(text)
        except ValueError as e:
            raise BadPactFormat('pact is not valid JSON: {}'.format(e)) from e
        return cls.from_dict(document)

    @classmethod
    def load(cls, path):
        with open(path, 'r') as pact_file:
            return cls.from_json(pact_file.read())

    def merge(self, other):
        """
        Combine with another pact between the same parties.

        Interactions of ``other`` replace ours when descriptions match and
        are appended otherwise.
        """
        if (self.consumer, self.provider) != (other.consumer, other.provider):
            raise ValueError('cannot merge pacts between different parties')
        interactions = list(self.interactions)
        positions = {i.description: n for n, i in enumerate(interactions)}
        for interaction in other.interactions:
            if interaction.description in positions:
                interactions[positions[interaction.description]] = interaction
            else:
                positions[interaction.description] = len(interactions)
                interactions.append(interaction)
        return Pact(self.consumer, self.provider, interactions,
                    specification_version=other.specification_version)

    def write(self, pact_dir):
        os.makedirs(pact_dir, exist_ok=True)
        path = os.path.join(pact_dir, self.filename)
        with open(path, 'w') as f:
            f.write(self.to_json())
        logger.info('Wrote pact between %s and %s to %s',
                    self.consumer, self.provider, path)
        return path
