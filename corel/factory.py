'''
Factory helpers for declaring custom relations from record types.

``custom_relation()`` is the free-standing entry point; ``CustomRelations`` is a mixin
exposing the same thing as a method, so relation definitions read as
``self.custom_relation(...)``.
'''
import logging

from corel.registry import registry
from corel.relations.custom import CustomRelation
from corel.util.types import BaseConstraint, EagerConstraint, EagerMatcher


logger = logging.getLogger(__name__)

def custom_relation(
    owner,
    related,
    base_constraint  : BaseConstraint,
    eager_constraint : EagerConstraint,
    eager_matcher    : EagerMatcher,
) -> CustomRelation:
    '''
    Define a custom relation from ``owner`` to the ``related`` record type.

    Parameters:
        owner:            record the relation is resolved from
        related:          Record subtype, or a tag registered with ``register_record``
        base_constraint:  ``(relation) -> None``
        eager_constraint: ``(relation, parents) -> None``
        eager_matcher:    ``(parents, results, name, relation) -> parents``

    Raises:
        TypeResolutionError: if ``related`` can't be resolved, instantiated, or can't
                             produce a query
    '''
    instance = registry.new_instance(related)
    query = instance.new_query()

    logger.debug(
        f'Custom relation {owner.__class__.__name__} -> {instance.__class__.__name__}'
    )

    return CustomRelation(query, owner, base_constraint, eager_constraint, eager_matcher)


class CustomRelations:
    def custom_relation(
        self,
        related,
        base_constraint  : BaseConstraint,
        eager_constraint : EagerConstraint,
        eager_matcher    : EagerMatcher,
    ) -> CustomRelation:
        return custom_relation(
            self,
            related,
            base_constraint,
            eager_constraint,
            eager_matcher,
        )
