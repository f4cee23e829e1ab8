'''
Example usage for this file's utilities:

# get SA engine, creating folder hierarchy for file-backed SQLite URLs
engine = db.get_engine(<url>)

# convert raw results to dictionaries, keys corresponding to col names
select_dicts = db.result_dicts(engine_results)

# use table defaults and cols to create compliant insert
insert_dicts = [ db.prepare_insert(<table>, sd) for sd in select_dicts ]
'''

import logging
from pathlib import Path

import sqlalchemy as sa


logger = logging.getLogger(__name__)

def get_engine(url: str | sa.URL, echo=False):
    '''
    Create an engine for the provided URL. Bare paths are taken to be SQLite database
    files, and their parent directories are created if missing.
    '''
    if isinstance(url, str) and '://' not in url:
        Path(url).parent.mkdir(parents=True, exist_ok=True)
        url = f'sqlite:///{url}'

    url = sa.make_url(url)
    if url.get_backend_name() == 'sqlite' and url.database not in (None, '', ':memory:'):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    return sa.create_engine(url, echo=echo)

# RAW CURSOR-RESULT MANIPULATION
def result_mappings_all(results):
    return results.mappings().all()

def result_dicts(results):
    '''
    Parse SQLAlchemy results into Python dicts keyed by result column names.
    '''
    return [dict(r) for r in result_mappings_all(results)]

def prepare_insert(table, value_dict):
    '''
    Fill an insert dictionary with table column defaults. Keys that aren't columns of the
    table are dropped.
    '''
    insert_dict = get_column_defaults(table)
    insert_dict.update(
        { k:v for k,v in value_dict.items() if k in table.c }
    )

    return insert_dict

def get_column_defaults(table, include_all=True):
    '''
    Provide column:default pairs for a provided SQLAlchemy table.

    Parameters:
        table: SQLAlchemy table
        include_all: whether to include all columns, even those without explicit defaults
    '''
    default_values = {}
    for column in table.columns:
        if column.primary_key:
            continue

        if column.default is not None and column.default.is_scalar:
            default_values[column.name] = column.default.arg
        elif column.nullable:
            default_values[column.name] = None
        elif include_all:
            # assume empty string if col has no explicit default and isn't nullable
            default_values[column.name] = ''

    return default_values
