'''
Relation

Base contract every relation kind satisfies so it can be resolved both lazily (for one
parent record) and eagerly (for a batch of parents with a single query). The eager
pipeline in ``corel.loader`` only ever talks to relations through these methods:

1. ``init_relation(parents, name)``: seed every parent with an empty value
2. ``add_eager_constraints(parents)``: scope the query to the whole batch
3. ``get_eager()``: execute the query once
4. ``match(parents, results, name)``: attach results back onto each parent

Lazy resolution instead relies on ``add_constraints()``, applied by the constructor,
followed by ``get_results()``.

.. admonition:: Constraint suppression

    Eager loading builds relations through the same relation methods as lazy access,
    but the single-parent base constraint must not land on the batch query. Relations
    built inside ``Relation.no_constraints()`` skip ``add_constraints()``. The flag is a
    context variable, so relations resolved in other threads or tasks at the same time
    are unaffected.
'''
import logging
from abc import ABCMeta, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from collections.abc import Callable, Sequence

from corel.query import Query


logger = logging.getLogger(__name__)

_constraints_enabled: ContextVar[bool] = ContextVar('constraints_enabled', default=True)


class Relation(metaclass=ABCMeta):
    def __init__(self, query: Query, parent):
        '''
        Parameters:
            query:  query against the related record type's table; owned by the relation
            parent: record the relation was resolved from
        '''
        self.query   = query
        self.parent  = parent
        self.related = query.record

        if self.constraints_enabled():
            self.add_constraints()

    @staticmethod
    def constraints_enabled() -> bool:
        return _constraints_enabled.get()

    @staticmethod
    @contextmanager
    def no_constraints():
        token = _constraints_enabled.set(False)
        try:
            yield
        finally:
            _constraints_enabled.reset(token)

    @classmethod
    def unconstrained(cls, factory: Callable[[], 'Relation']) -> 'Relation':
        '''
        Build a relation with base constraints suppressed.
        '''
        with cls.no_constraints():
            return factory()

    @abstractmethod
    def add_constraints(self):
        '''
        Scope the query to the single parent record.
        '''
        raise NotImplementedError

    @abstractmethod
    def add_eager_constraints(self, parents: Sequence):
        '''
        Scope the query to every record in the parent batch.
        '''
        raise NotImplementedError

    @abstractmethod
    def init_relation(self, parents: Sequence, name: str) -> Sequence:
        raise NotImplementedError

    @abstractmethod
    def match(self, parents: Sequence, results: Sequence, name: str) -> Sequence:
        raise NotImplementedError

    @abstractmethod
    def get_results(self):
        raise NotImplementedError

    def get_eager(self):
        return self.query.get()

    def get_query(self) -> Query:
        return self.query

    def get_parent(self):
        return self.parent

    def get_related(self):
        '''
        Prototype instance of the related record type.
        '''
        return self.related

    def get_keys(self, records: Sequence, key: str | Callable | None = None) -> list:
        '''
        Unique, non-null keys across a batch of records; the primary key by default.
        '''
        return self.related.new_collection(records).model_keys(key)

    def __getattr__(self, name):
        # forward unknown attributes to the query builder, keeping chained calls on the
        # relation rather than the bare query
        if name.startswith('_') or 'query' not in self.__dict__:
            raise AttributeError(name)

        attr = getattr(self.query, name)
        if not callable(attr):
            return attr

        def forward(*args, **kwargs):
            res = attr(*args, **kwargs)
            return self if res is self.query else res

        return forward

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.parent!r} -> {self.related.__class__.__name__}>'
