'''
corel: custom relations for a lightweight SQLAlchemy record layer.

Record types declare relations with ``@relation``; custom relations delegate their
single-record constraint, batch constraint and batch matching to caller-supplied
callables, and can be eager loaded with one query per relation like any other.
'''
from corel.errors import (
    CorelError,
    TypeResolutionError,
    QueryExecutionError,
    RelationNotFoundError,
    MatcherContractViolation,
)
from corel.database   import Database
from corel.registry   import Registry, registry, register_record
from corel.collection import Collection
from corel.query      import Query
from corel.relations  import Relation, CustomRelation
from corel.record     import Record, relation
from corel.factory    import custom_relation, CustomRelations
from corel.loader     import eager_load
from corel.matching   import build_dictionary, match_dictionary, match_many, match_one
