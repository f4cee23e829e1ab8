'''
Query

Thin builder around a SQLAlchemy ``Select`` targeting a single record type's table.
Every builder method mutates the wrapped statement in place and returns the query, so
constraint callables can chain calls without ever swapping out the query object a
relation holds.

.. code-block:: python

    users = (
        User.query()
            .where_in('id', [1, 2])
            .order_by('name')
            .with_('roles')
            .get()
    )

Rows are hydrated into instances of the query's record type. Any extra selected columns
(e.g., pivot keys added with ``add_columns``) land in the record attributes alongside
the table columns, which is what custom matchers typically key on.
'''
import logging
from collections.abc import Callable, Iterable

import sqlalchemy as sa

from corel.collection import Collection


logger = logging.getLogger(__name__)


class Query:
    def __init__(self, record, database):
        '''
        Parameters:
            record:   prototype instance of the record type being queried
            database: database the statement is executed against
        '''
        self.record   = record
        self.database = database
        self.table    = record.table

        self.statement = sa.select(self.table)
        self.eager_load: dict[str, Callable | None] = {}

    def column(self, column: str | sa.ColumnElement) -> sa.ColumnElement:
        '''
        Resolve a column name against the query's table; column objects pass through.
        '''
        if isinstance(column, str):
            return self.table.c[column]
        return column

    def where(self, *clauses, **equals):
        '''
        Add WHERE clauses. Keyword arguments are shorthand for table column equality.
        '''
        clauses = list(clauses)
        clauses.extend(self.column(name) == value for name, value in equals.items())

        self.statement = self.statement.where(*clauses)
        return self

    def where_in(self, column: str | sa.ColumnElement, values: Iterable):
        self.statement = self.statement.where(self.column(column).in_(list(values)))
        return self

    def join(self, target, onclause=None, isouter=False):
        self.statement = self.statement.join(target, onclause, isouter=isouter)
        return self

    def add_columns(self, *columns):
        self.statement = self.statement.add_columns(*columns)
        return self

    def distinct(self):
        self.statement = self.statement.distinct()
        return self

    def order_by(self, *columns):
        self.statement = self.statement.order_by(*(self.column(c) for c in columns))
        return self

    def limit(self, limit: int):
        self.statement = self.statement.limit(limit)
        return self

    def with_(self, *relations: str, **constrained: Callable):
        '''
        Register relations to eager load once results are fetched. Names may be dotted
        paths for nested relations; keyword entries attach a callable that receives the
        relation to add further constraints.
        '''
        for name in relations:
            self.eager_load.setdefault(name, None)
        self.eager_load.update(constrained)

        return self

    def get(self) -> Collection:
        '''
        Execute the statement once and hydrate the rows, then eager load any relations
        registered with ``with_``. The batch returned by the matchers is what comes back.
        '''
        rows = self.database.execute(self.statement)
        records = self.record.new_collection(
            self.record.new_from_row(row) for row in rows
        )

        if records and self.eager_load:
            from corel.loader import eager_load
            records = self.record.collection_cls.wrap(
                eager_load(records, **self.eager_load)
            )

        return records

    def first(self):
        return self.limit(1).get().first()

    def __str__(self):
        return str(self.statement)
