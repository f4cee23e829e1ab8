'''
Database

Central object wrapping the storage resource records are read from. The database owns a
SQLAlchemy engine and exposes the small set of operations the record layer needs:
executing SELECT statements into row dictionaries, bulk table inserts, schema
(re)creation, and binding record types so they can produce queries.

Note: statement log
    Every statement the engine sends to the DBAPI cursor passes through the
    ``before_cursor_execute`` event hook, which appends the SQL text to any open
    ``statement_log()`` collectors. This is how the one-query-per-eager-pass property of
    relations is checked, without the record layer having to count its own calls.
'''
import time
import logging
import threading
from contextlib import contextmanager

import sqlalchemy as sa
from sqlalchemy import event

from corel import util
from corel import settings
from corel.errors import QueryExecutionError


logger = logging.getLogger(__name__)


class Database:
    def __init__(self, url: str | sa.URL | None = None, echo: bool | None = None):
        '''
        Parameters:
            url:  SQLAlchemy URL or SQLite file path; defaults to
                  ``settings.DATABASE_URL``
            echo: whether the engine should echo SQL; defaults to ``settings.ECHO_SQL``
        '''
        self.url  = settings.DATABASE_URL if url is None else url
        self.echo = settings.ECHO_SQL if echo is None else echo

        self._engine = None
        self._logs: list[list[str]] = []
        self._insert_lock = threading.Lock()

    @property
    def engine(self):
        '''
        Singleton engine for DB interaction, created on first access.
        '''
        if self._engine is None:
            self._engine = util.db.get_engine(self.url, echo=self.echo)
            event.listen(self._engine, 'before_cursor_execute', self._log_statement)

        return self._engine

    def _log_statement(self, conn, cursor, statement, parameters, context, executemany):
        for log in self._logs:
            log.append(statement)

    @contextmanager
    def statement_log(self):
        '''
        Collect the SQL text of every statement executed inside the with-block.

        .. code-block:: python

            with db.statement_log() as log:
                users = User.query().with_('roles').get()

            assert len(log) == 2
        '''
        log = []
        self._logs.append(log)
        try:
            yield log
        finally:
            self._logs.remove(log)

    @contextmanager
    def connect(self):
        with self.engine.connect() as connection:
            yield connection

    def bind(self, *record_types):
        '''
        Attach record types to this database. Bound types can produce queries.
        '''
        for record_type in record_types:
            record_type.database = self

        return self

    def execute(self, statement) -> list[dict]:
        '''
        Execute a single statement and return its rows as dictionaries. Any SQLAlchemy
        failure is raised as a ``QueryExecutionError``; nothing is retried.
        '''
        try:
            with self.engine.connect() as connection:
                res = connection.execute(statement)
                return util.db.result_dicts(res)
        except sa.exc.SQLAlchemyError as e:
            logger.error(f'Statement execution failed: {e}')
            raise QueryExecutionError(str(e), statement=statement) from e

    def recreate(self, metadata: sa.MetaData):
        metadata.drop_all(self.engine)
        metadata.create_all(self.engine, checkfirst=True)

    def insert(self, inserts: dict[sa.Table, list[dict]]):
        '''
        Perform provided table inserts under a single transaction.

        Parameters:
            inserts: table-indexed dictionary of insert lists
        '''
        total_inserts = sum([len(ilist) for ilist in inserts.values()])
        if total_inserts < 1: return

        logger.info(f'Total of {total_inserts} inserts to perform')

        start = time.time()
        with self.engine.connect() as connection:
            with self._insert_lock:
                for table, table_inserts in inserts.items():
                    if len(table_inserts) == 0: continue

                    logger.debug(
                        f'Inserting {len(table_inserts)} entries into table "{table.name}"'
                    )

                    connection.execute(
                        sa.insert(table),
                        [util.db.prepare_insert(table, row) for row in table_inserts]
                    )
                connection.commit()
                logger.info(f'Insert transaction completed successfully in {time.time()-start:.2f}s')
