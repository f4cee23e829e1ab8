'''
Custom relation

Relation kind for joins the stock relation shapes can't express. Instead of encoding a
fixed key layout, the relation is handed three callables and delegates to them:

- ``base_constraint(relation)``: scope ``relation.query`` to ``relation.parent``
- ``eager_constraint(relation, parents)``: scope ``relation.query`` to a parent batch,
  typically with a ``key IN (...)`` over ``relation.get_keys(parents)``
- ``eager_matcher(parents, results, name, relation)``: attach the fetched results to
  each parent under ``name`` and return the parent batch

Example: permissions reachable from a user through two pivot tables.

.. code-block:: python

    def base(relation):
        relation.join(permission_role, ...).join(role_user, ...)
        relation.where(role_user.c.user_id == relation.parent.id)

    def eager(relation, users):
        relation.join(permission_role, ...).join(role_user, ...)
        relation.add_columns(role_user.c.user_id.label('user_id_key'))
        relation.where_in(role_user.c.user_id, relation.get_keys(users))

    def matcher(users, permissions, name, relation):
        return match_many(users, permissions, name, relation, 'id', 'user_id_key')

Note: matcher contract
    The relation doesn't check what the matcher does. ``init_relation`` has already
    given every parent an empty collection before the matcher runs, so a matcher only
    needs to set values for parents that have results; it must still return the full
    parent batch. Matchers should index the results once (see ``corel.matching``)
    rather than re-scan them for every parent.
'''
import logging
from collections.abc import Sequence

from corel.query import Query
from corel.relations.base import Relation
from corel.util.types import BaseConstraint, EagerConstraint, EagerMatcher


logger = logging.getLogger(__name__)


class CustomRelation(Relation):
    def __init__(
        self,
        query            : Query,
        parent,
        base_constraint  : BaseConstraint,
        eager_constraint : EagerConstraint,
        eager_matcher    : EagerMatcher,
    ):
        for behavior_name, behavior in (
            ('base_constraint',  base_constraint),
            ('eager_constraint', eager_constraint),
            ('eager_matcher',    eager_matcher),
        ):
            if not callable(behavior):
                raise TypeError(f'{behavior_name} must be callable, got {behavior!r}')

        # set before the base constructor, which may apply the base constraint
        self.base_constraint  = base_constraint
        self.eager_constraint = eager_constraint
        self.eager_matcher    = eager_matcher

        super().__init__(query, parent)

    def add_constraints(self):
        if self.constraints_enabled():
            self.base_constraint(self)

    def add_eager_constraints(self, parents: Sequence):
        self.eager_constraint(self, parents)

    def init_relation(self, parents: Sequence, name: str) -> Sequence:
        for parent in parents:
            parent.set_relation(name, self.related.new_collection())

        return parents

    def get_results(self):
        return self.query.get()

    def match(self, parents: Sequence, results: Sequence, name: str) -> Sequence:
        logger.debug(
            f'Matching {len(results)} {self.related.__class__.__name__} results '
            f'onto {len(parents)} parents as "{name}"'
        )
        return self.eager_matcher(parents, results, name, self)
