'''
Collection

List type returned for multi-record results and to-many relation values. Adds the small
set of helpers relation matchers lean on: key extraction, grouping into dictionaries,
de-duplication and eager loading onto records already in memory.

Keys are given either as an attribute name or as a callable taking a record. When no
key is given, the record's primary key is used.
'''
from collections import defaultdict
from collections.abc import Callable, Iterable


def _key_getter(key):
    if key is None:
        return lambda record: record.get_key()
    if callable(key):
        return key
    return lambda record: record.get_attribute(key)


class Collection(list):
    def model_keys(self, key: str | Callable | None = None) -> list:
        '''
        Unique, non-null key values across the collection, in first-seen order.
        '''
        getter = _key_getter(key)

        keys = {}
        for record in self:
            value = getter(record)
            if value is not None:
                keys[value] = None

        return list(keys)

    def pluck(self, key: str | Callable) -> list:
        getter = _key_getter(key)
        return [getter(record) for record in self]

    def dictionary(self, key: str | Callable | None = None) -> dict:
        '''
        Index records by key; later records overwrite earlier ones on key collision.
        '''
        getter = _key_getter(key)
        return { getter(record): record for record in self }

    def group_by(self, key: str | Callable, multi: bool = False) -> dict[object, 'Collection']:
        '''
        Group records into key-indexed collections in a single pass.

        Parameters:
            key:   attribute name or callable
            multi: whether ``key`` yields an iterable of keys; the record is then placed
                   in the group of each key
        '''
        getter = _key_getter(key)

        groups = defaultdict(self.__class__)
        for record in self:
            value = getter(record)
            for k in (value if multi else (value,)):
                groups[k].append(record)

        return dict(groups)

    def unique(self, key: str | Callable | None = None) -> 'Collection':
        getter = _key_getter(key)

        seen = set()
        items = []
        for record in self:
            value = getter(record)
            if value in seen:
                continue
            seen.add(value)
            items.append(record)

        return self.__class__(items)

    def filter(self, fn: Callable) -> 'Collection':
        return self.__class__(record for record in self if fn(record))

    def first(self, default=None):
        return self[0] if self else default

    def load(self, *relations: str, **constrained: Callable) -> 'Collection':
        '''
        Eager load relations onto the records of this collection, one query per
        relation. See ``loader.eager_load``.

        Returns the parent batch handed back by the matchers, which is this collection
        unless a matcher replaced it.
        '''
        from corel.loader import eager_load

        if not self:
            return self

        return self.wrap(eager_load(self, *relations, **constrained))

    @classmethod
    def wrap(cls, items: Iterable) -> 'Collection':
        if isinstance(items, cls):
            return items
        return cls(items)
