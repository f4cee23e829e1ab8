'''
Eager loading

Resolves relations for a whole batch of parent records with one query per relation per
nesting level, regardless of batch size.

For each requested relation:

1. build the relation from a blank record of the batch type, base constraints
   suppressed
2. ``init_relation``: seed every parent with the empty value
3. ``add_eager_constraints``: scope the query to the batch, then apply any caller
   constraint callable
4. ``get_eager``: execute the query once; nested relations registered on the query are
   eager loaded onto the fetched records the same way
5. ``match``: hand results to the relation to attach onto each parent

Relation specs:

.. code-block:: python

    eager_load(users, 'roles', 'roles.permissions')
    eager_load(users, permissions=lambda rel: rel.where(permissions.c.name != 'root'))

Dotted paths load every prefix first (``roles.permissions`` implies ``roles``). A
constraint attached to a dotted path applies to its last segment.
'''
import logging
from collections.abc import Callable, Sequence

from corel import settings
from corel.relations.base import Relation
from corel.errors import MatcherContractViolation


logger = logging.getLogger(__name__)

def parse_relations(*relations: str, **constrained: Callable | None) -> dict[str, Callable | None]:
    '''
    Flatten relation specs into an ordered ``{path: constraint}`` dict, adding every
    missing prefix of dotted paths without a constraint.
    '''
    specs = { name: None for name in relations }
    specs.update(constrained)

    parsed = {}
    for path, constraint in specs.items():
        segments = path.split('.')
        for i in range(1, len(segments)):
            parsed.setdefault('.'.join(segments[:i]), None)

        if constraint is not None or path not in parsed:
            parsed[path] = constraint

    return parsed

def nested_relations(name: str, specs: dict[str, Callable | None]) -> dict[str, Callable | None]:
    '''
    Specs nested directly under ``name``, with the ``name.`` prefix stripped.
    '''
    prefix = f'{name}.'
    return {
        path[len(prefix):]: constraint
        for path, constraint in specs.items()
        if path.startswith(prefix)
    }

def eager_load(records: Sequence, *relations: str, **constrained: Callable | None) -> Sequence:
    '''
    Eager load relations onto ``records``. An empty batch is returned as-is without
    touching the database.
    '''
    if not records:
        return records

    specs = parse_relations(*relations, **constrained)

    for name, constraint in specs.items():
        # nested paths are loaded by the relation query of their top-level segment
        if '.' in name:
            continue

        records = eager_load_relation(
            records,
            name,
            constraint,
            nested_relations(name, specs),
        )

    return records

def eager_load_relation(
    records    : Sequence,
    name       : str,
    constraint : Callable | None = None,
    nested     : dict[str, Callable | None] | None = None,
) -> Sequence:
    # the parent is a blank record, never a member of the batch
    relation = Relation.unconstrained(lambda: records[0].__class__().relation(name))

    if nested:
        relation.get_query().with_(**nested)

    records = relation.init_relation(records, name)
    relation.add_eager_constraints(records)

    if constraint is not None:
        constraint(relation)

    results = relation.get_eager()

    logger.debug(f'Eager loaded {len(results)} results for "{name}" over {len(records)} parents')

    matched = relation.match(records, results, name)

    if settings.STRICT_MATCHING:
        check_matched(records, matched, name)

    return matched

def check_matched(parents: Sequence, matched: Sequence, name: str):
    '''
    Verify a matcher returned every parent it was given, each with ``name`` loaded.
    '''
    if matched is None:
        raise MatcherContractViolation(f'Matcher for "{name}" returned no parent batch')

    returned = { id(parent) for parent in matched }
    for parent in parents:
        if id(parent) not in returned:
            raise MatcherContractViolation(
                f'Matcher for "{name}" dropped parent {parent!r} from the batch'
            )
        if not parent.relation_loaded(name):
            raise MatcherContractViolation(
                f'Matcher for "{name}" left parent {parent!r} without a value'
            )
