import pytest

from corel import Collection, Query, QueryExecutionError, Record, TypeResolutionError

from setups.access import User, Permission, users_table, role_user_table


def test_get_hydrates_records(db):
    users = User.query().order_by('id').get()

    assert isinstance(users, Collection)
    assert all(isinstance(u, User) for u in users)
    assert [(u.id, u.name) for u in users] == [(1, 'u1'), (2, 'u2'), (3, 'u3')]

def test_where_keyword_equality(db):
    assert User.query().where(name='u2').first().id == 2

def test_where_in_and_limit(db):
    users = User.query().where_in('id', [2, 3]).order_by('id').limit(1).get()
    assert [u.id for u in users] == [2]

def test_where_in_empty_matches_nothing(db):
    assert User.query().where_in('id', []).get() == []

def test_extra_columns_become_attributes(db):
    users = (
        User.query()
            .join(role_user_table, role_user_table.c.user_id == users_table.c.id)
            .add_columns(role_user_table.c.role_id.label('role_key'))
            .order_by('id')
            .get()
    )
    assert [(u.id, u.role_key) for u in users] == [(1, 1), (2, 2)]

def test_first_without_rows(db):
    assert User.query().where(id=99).first() is None

def test_builder_returns_same_query(db):
    query = User.query()
    assert query.where(id=1) is query
    assert query.with_('permissions') is query
    assert query.eager_load == {'permissions': None}

def test_execution_error_wraps_storage_error(db):
    query = User.query().where(users_table.c.id == 1)

    with db.connect() as connection:
        connection.exec_driver_sql('DROP TABLE users')
        connection.commit()

    with pytest.raises(QueryExecutionError) as excinfo:
        query.get()

    assert excinfo.value.statement is query.statement

def test_query_requires_table():
    class Bare(Record):
        pass

    with pytest.raises(TypeResolutionError):
        Bare.query()

def test_statement_str(db):
    assert 'FROM permissions' in str(Permission.query())
