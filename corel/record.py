'''
Record is the base class for table-backed types. It keeps row values in an attribute
dictionary, hands out queries against its table, and manages a per-instance relation
cache that both lazy access and eager loading write into.

Relation declaration syntax:

.. code-block:: python

    class User(CustomRelations, Record):
        table = users_table

        @relation
        def permissions(self):
            return self.custom_relation(
                Permission,
                base_constraint,
                eager_constraint,
                eager_matcher,
            )

    user.relation('permissions')  # fresh relation object, base constraint applied
    user.permissions              # related records; one query on first access, cached

.. admonition:: Relation registry

    ``@relation`` wraps the method in a descriptor and the ``RelationRegistryMeta``
    metaclass sweeps descriptors into ``relation_registry`` at class creation. The
    registry is built base-first down the MRO, so subclasses can override relations of
    their parents by name. The registry is the only place eager loading looks up
    relation names; a plain method returning a relation is not eager loadable.
'''
import logging
from collections.abc import Callable, Iterable

from corel.query import Query
from corel.relations.base import Relation
from corel.collection import Collection
from corel.errors import TypeResolutionError, RelationNotFoundError


logger = logging.getLogger(__name__)

class relation:
    '''
    Descriptor for relation-defining methods. Accessed on a class, it returns itself;
    on an instance, it returns the (lazily loaded, cached) relation value.
    '''
    def __init__(self, func: Callable):
        self.func = func
        self.name = func.__name__
        self.__doc__ = func.__doc__

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.get_relation_value(self.name)


class RelationRegistryMeta(type):
    '''
    Metaclass collecting ``@relation`` descriptors into a class-level registry.
    '''
    def __new__(cls, name, bases, attrs):
        new_cls = super().__new__(cls, name, bases, attrs)

        # base-first over the full MRO, matching attribute lookup order
        relation_registry = {}
        for _class in reversed(new_cls.__mro__):
            for attr_name, attr_value in vars(_class).items():
                if isinstance(attr_value, relation):
                    relation_registry[attr_name] = attr_value.func
                elif attr_name in relation_registry:
                    del relation_registry[attr_name]

        new_cls.relation_registry = relation_registry

        return new_cls


class Record(metaclass=RelationRegistryMeta):
    table           = None
    primary_key     = 'id'
    database        = None
    collection_cls  = Collection

    def __init__(self, **attributes):
        object.__setattr__(self, '_attributes', dict(attributes))
        object.__setattr__(self, '_relations', {})

    def __getattr__(self, name):
        # only reached when normal lookup fails, i.e., for row attributes
        if name.startswith('_'):
            raise AttributeError(name)

        attributes = self.__dict__.get('_attributes', {})
        if name in attributes:
            return attributes[name]

        raise AttributeError(f'{self.__class__.__name__!r} record has no attribute {name!r}')

    def __setattr__(self, name, value):
        if name in self.relation_registry:
            self.set_relation(name, value)
        elif name.startswith('_') or hasattr(type(self), name):
            object.__setattr__(self, name, value)
        else:
            self._attributes[name] = value

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.primary_key}={self.get_key()!r}>'

    @property
    def attributes(self) -> dict:
        return self._attributes

    @property
    def relations(self) -> dict:
        return self._relations

    @classmethod
    def new_from_row(cls, row: dict):
        return cls(**row)

    @classmethod
    def query(cls) -> Query:
        return cls().new_query()

    def new_query(self) -> Query:
        '''
        Fresh, unconstrained query against this record type's table.
        '''
        cls = self.__class__
        if cls.table is None:
            raise TypeResolutionError(f'Record type {cls.__qualname__} has no table')
        if cls.database is None:
            raise TypeResolutionError(f'Record type {cls.__qualname__} is not bound to a database')

        return Query(self, cls.database)

    def new_collection(self, items: Iterable = ()) -> Collection:
        return self.collection_cls(items)

    def get_key(self):
        return self._attributes.get(self.primary_key)

    def get_attribute(self, name, default=None):
        if name in self._attributes:
            return self._attributes[name]
        if name in self.relation_registry:
            return self.get_relation_value(name)
        return default

    def set_attribute(self, name, value):
        self._attributes[name] = value
        return self

    def relation(self, name):
        '''
        Build a fresh relation object for the named relation.
        '''
        func = self.relation_registry.get(name)
        if func is None:
            raise RelationNotFoundError(
                f'Call to undefined relation "{name}" on {self.__class__.__qualname__}'
            )

        rel = func(self)
        if not isinstance(rel, Relation):
            raise RelationNotFoundError(
                f'{self.__class__.__qualname__}.{name} must return a Relation instance'
            )

        return rel

    def get_relation_value(self, name):
        '''
        Cached value of the relation, resolving it with the relation's own query when it
        hasn't been loaded yet.
        '''
        if self.relation_loaded(name):
            return self._relations[name]

        results = self.relation(name).get_results()
        logger.debug(f'Lazy loaded "{name}" on {self!r}')
        self.set_relation(name, results)

        return results

    def relation_loaded(self, name) -> bool:
        return name in self._relations

    def get_relation(self, name):
        return self._relations[name]

    def set_relation(self, name, value):
        self._relations[name] = value
        return self

    def unset_relation(self, name):
        self._relations.pop(name, None)
        return self

    def load(self, *relations: str, **constrained: Callable):
        '''
        Eager load relations onto this single record. Values are set on the record in
        place; the record itself is returned, whatever batch the matchers hand back.
        '''
        self.new_collection([self]).load(*relations, **constrained)
        return self
