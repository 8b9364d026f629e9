from collections import namedtuple

from .exceptions import BadPactFormat, DuplicateFieldError
from .fields import Field, Integer, Number, Object, String, Uuid, field_from_dict


METHODS = ('GET', 'POST', 'PUT', 'PATCH', 'DELETE')

DUPLICATE_POLICIES = ('error', 'overwrite')


class Interaction(namedtuple(
        'Interaction', 'description method path status body provider_state')):
    """
    One expected request/response pairing.

    ``body`` is an ``Object`` field describing the response body shape.
    """

    __slots__ = ()

    def __new__(cls, description, method, path, status=200, body=None,
                provider_state=None):
        method = method.upper()
        if method not in METHODS:
            raise ValueError('unsupported method {!r}'.format(method))
        if body is None:
            body = Object()
        elif not isinstance(body, Object):
            body = Object(body)
        return super().__new__(
            cls, description, method, path, int(status), body, provider_state)

    def keys(self):
        """Top-level body keys a consumer must get back."""
        return self.body.names()

    def to_dict(self):
        interaction = {'description': self.description}
        if self.provider_state is not None:
            interaction['providerState'] = self.provider_state
        interaction['request'] = {
            'method': self.method,
            'path': self.path,
        }
        interaction['response'] = {
            'status': self.status,
            'bodyShape': self.body.to_dict()['fields'],
        }
        return interaction

    @classmethod
    def from_dict(cls, d):
        try:
            request, response = d['request'], d['response']
            shape = {'type': Object.type_name, 'fields': response.get('bodyShape') or {}}
            return cls(
                description=d['description'],
                method=request['method'],
                path=request['path'],
                status=response['status'],
                body=field_from_dict(shape),
                provider_state=d.get('providerState'),
            )
        except KeyError as e:
            raise BadPactFormat('interaction key {} not found'.format(e)) from e
        except (TypeError, AttributeError, ValueError) as e:
            raise BadPactFormat('invalid interaction {!r}: {}'.format(d, e)) from e


class ShapeBuilder:
    """
    Builder for body shapes.

    Declarations are kept in order. Declaring a name twice raises
    ``DuplicateFieldError`` unless the builder was created with
    ``on_duplicate='overwrite'``.
    """

    def __init__(self, on_duplicate='error'):
        if on_duplicate not in DUPLICATE_POLICIES:
            raise ValueError('unknown duplicate policy {!r}'.format(on_duplicate))
        self.on_duplicate = on_duplicate
        self.fields = {}

    def declare(self, name, field):
        if not isinstance(field, Field):
            raise TypeError('{!r} is not a body field'.format(field))
        if name in self.fields and self.on_duplicate == 'error':
            raise DuplicateFieldError(name)
        self.fields[name] = field
        return self

    def string_type(self, name):
        return self.declare(name, String())

    def number_type(self, name):
        return self.declare(name, Number())

    def integer_type(self, name):
        return self.declare(name, Integer())

    def uuid(self, name):
        return self.declare(name, Uuid())

    def object(self, name, shape):
        """Declare a nested object from a ShapeBuilder, an Object or a dict of fields."""
        if isinstance(shape, ShapeBuilder):
            shape = shape.build_shape()
        elif not isinstance(shape, Object):
            shape = Object(shape)
        return self.declare(name, shape)

    def build_shape(self):
        return Object(self.fields)


class InteractionBuilder(ShapeBuilder):
    """
    Builder for interactions.

    ``add_method`` is called with every interaction this builder builds.
    """

    def __init__(self, add_method=None, on_duplicate='error'):
        super().__init__(on_duplicate=on_duplicate)
        self.add_method = add_method

        self.provider_state = None
        self.description = None
        self.request = None
        self.status = 200

    def given(self, provider_state):
        self.provider_state = provider_state
        return self

    def upon_receiving(self, description):
        self.description = description
        return self

    def with_request(self, method, path):
        self.request = (method.upper(), path)
        return self

    def will_respond_with(self, status):
        self.status = status
        return self

    def build(self):
        if self.request is None:
            raise ValueError('with_request() must be called before build()')
        method, path = self.request
        interaction = Interaction(
            description=self.description or '{} {}'.format(method, path),
            method=method,
            path=path,
            status=self.status,
            body=self.build_shape(),
            provider_state=self.provider_state,
        )
        if self.add_method is not None:
            self.add_method(interaction)
        return interaction
