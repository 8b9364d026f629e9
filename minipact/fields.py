"""
Body shape fields.

A body shape is a tree of fields: leaves describe a JSON value by its type,
``Object`` nodes map names to further fields. The mock service uses
``generate`` to produce a body of the right shape, the pact document stores
``to_dict``.
"""

import json
import logging
import random
import string
import types
import uuid

from .exceptions import BadPactFormat


logger = logging.getLogger(__name__)


class Field:
    """Base class for body shape fields."""

    type_name = None

    def generate(self):
        raise NotImplementedError

    def to_dict(self):
        return {'type': self.type_name}

    def __eq__(self, other):
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(json.dumps(self.to_dict(), sort_keys=True))

    def __repr__(self):
        return '{}()'.format(self.__class__.__name__)


class String(Field):
    type_name = 'string'

    def generate(self):
        return ''.join(random.choice(string.ascii_letters) for _ in range(10))


class Number(Field):
    type_name = 'number'

    def generate(self):
        return round(random.uniform(0, 1000), 2)


class Integer(Field):
    type_name = 'integer'

    def generate(self):
        return random.randint(0, 1000)


class Uuid(Field):
    type_name = 'uuid'

    def generate(self):
        return str(uuid.uuid4())


class Object(Field):
    """
        A JSON object with named children.

        Children keep their declaration order. The mapping is read-only once
        the object is built.
    """
    type_name = 'object'

    def __init__(self, fields=None):
        self.fields = types.MappingProxyType(dict(fields or ()))

    def generate(self):
        return {name: field.generate() for name, field in self.fields.items()}

    def to_dict(self):
        return {
            'type': self.type_name,
            'fields': {name: field.to_dict() for name, field in self.fields.items()},
        }

    def names(self):
        """Top-level child names, in declaration order."""
        return list(self.fields)

    def keys(self, prefix=''):
        """
            Yield every key of the tree, nested ones in dotted form.

            ``Object({'ids': Object({'id': Integer()})}).keys()`` yields
            ``ids`` then ``ids.id``.
        """
        for name, field in self.fields.items():
            key = prefix + name
            yield key
            if isinstance(field, Object):
                for nested in field.keys(prefix=key + '.'):
                    yield nested

    def __repr__(self):
        return 'Object({!r})'.format(dict(self.fields))


FIELD_TYPES = {cls.type_name: cls for cls in (String, Number, Integer, Uuid, Object)}


def field_from_dict(d):
    """Rebuild a field from its ``to_dict`` form."""
    try:
        type_name = d['type']
    except (KeyError, TypeError) as e:
        raise BadPactFormat('field {!r} has no type'.format(d)) from e

    cls = FIELD_TYPES.get(type_name) if isinstance(type_name, str) else None
    if cls is None:
        raise BadPactFormat('unknown field type {!r}'.format(type_name))
    if cls is Object:
        children = d.get('fields') or {}
        try:
            items = list(children.items())
        except AttributeError as e:
            raise BadPactFormat('object fields must be a mapping, got {!r}'.format(children)) from e
        logger.debug('Rebuilding object with fields %s', [name for name, _ in items])
        return Object((name, field_from_dict(child)) for name, child in items)
    return cls()
