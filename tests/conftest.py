import pytest

from corel import Database
from corel.log import setup_logging

from setups import access, clients


setup_logging()

@pytest.fixture
def db():
    '''
    Fresh in-memory database per test, with both fixture schemas created, seeded, and
    their record types bound.
    '''
    database = Database('sqlite://', echo=False)

    for setup in (access, clients):
        database.recreate(setup.metadata)
        database.bind(*setup.record_types)
        setup.seed(database)

    return database
