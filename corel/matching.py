'''
Matching helpers for eager matchers.

Matching is a two-pass indexed join: one pass over the fetched results builds a
dictionary from key to results, then one pass over the parents looks up each parent's
key(s). Neither pass re-scans the other side, so a batch costs O(parents + results).

Keys are given as attribute names or callables. A callable may return a list or set of
keys to index a record under several keys at once (tuples are single, composite keys).
This is how one matcher pass honours OR-semantics across independent key spaces:

.. code-block:: python

    def matcher(clients, contacts, name, relation):
        keys = lambda r: [('client', r.client_id), ('crm', r.crm_id)]
        return match_many(clients, contacts, name, relation, keys, keys)

Null keys, including composite keys with a null member, are never indexed or looked
up, so records lacking a value in one key space don't collide on a shared null.
'''
from collections import defaultdict
from collections.abc import Callable, Sequence


def _is_null(value) -> bool:
    if isinstance(value, tuple):
        return any(v is None for v in value)
    return value is None

def _key_values(record, key) -> list:
    if callable(key):
        value = key(record)
    else:
        value = record.get_attribute(key)

    values = list(value) if isinstance(value, (list, set, frozenset)) else [value]
    return [v for v in values if not _is_null(v)]

def build_dictionary(results: Sequence, key: str | Callable) -> dict[object, list]:
    '''
    Index results by key in a single pass.

    Returns:
        dict mapping each key to the list of results carrying it, in result order
    '''
    dictionary = defaultdict(list)
    for result in results:
        for value in _key_values(result, key):
            dictionary[value].append(result)

    return dict(dictionary)

def match_dictionary(
    parents    : Sequence,
    dictionary : dict[object, list],
    name       : str,
    relation,
    parent_key : str | Callable,
) -> Sequence:
    '''
    Attach dictionary matches to each parent under ``name``. Parents with several keys
    receive the union of their matches, each related record at most once. Parents
    without matches are left untouched (keeping the value ``init_relation`` gave them).
    '''
    related = relation.get_related()

    for parent in parents:
        matches = []
        seen = set()
        for value in _key_values(parent, parent_key):
            for result in dictionary.get(value, ()):
                marker = result.get_key()
                if marker is None:
                    marker = id(result)
                if marker in seen:
                    continue
                seen.add(marker)
                matches.append(result)

        if matches:
            parent.set_relation(name, related.new_collection(matches))

    return parents

def match_many(
    parents    : Sequence,
    results    : Sequence,
    name       : str,
    relation,
    parent_key : str | Callable,
    result_key : str | Callable,
) -> Sequence:
    return match_dictionary(
        parents,
        build_dictionary(results, result_key),
        name,
        relation,
        parent_key,
    )

def match_one(
    parents    : Sequence,
    results    : Sequence,
    name       : str,
    relation,
    parent_key : str | Callable,
    result_key : str | Callable,
) -> Sequence:
    '''
    Like ``match_many``, but attach only the first matching record (or leave the
    ``init_relation`` default) for to-one shaped custom relations.
    '''
    dictionary = build_dictionary(results, result_key)

    for parent in parents:
        for value in _key_values(parent, parent_key):
            matches = dictionary.get(value)
            if matches:
                parent.set_relation(name, matches[0])
                break

    return parents
