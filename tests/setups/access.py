'''
Users, roles and permissions with two many-to-many pivots:

USER --< ROLE_USER >-- ROLE --< PERMISSION_ROLE >-- PERMISSION

None of these links are expressible as a single stock relation from users to
permissions, so each is a custom relation. Pivot keys are selected into the related
records (``user_key``, ``role_key``) for the matchers to index on.
'''
import sqlalchemy as sa

from corel import Record, relation, register_record, CustomRelations, match_many


metadata = sa.MetaData()
users_table = sa.Table(
    'users',
    metadata,
    sa.Column('id',   sa.Integer, primary_key=True),
    sa.Column('name', sa.String),
)
roles_table = sa.Table(
    'roles',
    metadata,
    sa.Column('id',   sa.Integer, primary_key=True),
    sa.Column('name', sa.String),
)
permissions_table = sa.Table(
    'permissions',
    metadata,
    sa.Column('id',   sa.Integer, primary_key=True),
    sa.Column('name', sa.String),
)
role_user_table = sa.Table(
    'role_user',
    metadata,
    sa.Column('id',      sa.Integer, primary_key=True),
    sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id')),
    sa.Column('role_id', sa.Integer, sa.ForeignKey('roles.id')),
)
permission_role_table = sa.Table(
    'permission_role',
    metadata,
    sa.Column('id',            sa.Integer, primary_key=True),
    sa.Column('permission_id', sa.Integer, sa.ForeignKey('permissions.id')),
    sa.Column('role_id',       sa.Integer, sa.ForeignKey('roles.id')),
)

# users -> roles
def _join_role_user(relation):
    relation.join(role_user_table, role_user_table.c.role_id == roles_table.c.id)
    relation.add_columns(role_user_table.c.user_id.label('user_key'))

def user_roles_base(relation):
    _join_role_user(relation)
    relation.where(role_user_table.c.user_id == relation.parent.id)

def user_roles_eager(relation, users):
    _join_role_user(relation)
    relation.where_in(role_user_table.c.user_id, relation.get_keys(users))

def user_roles_matcher(users, roles, name, relation):
    return match_many(users, roles, name, relation, 'id', 'user_key')

# roles -> permissions
def _join_permission_role(relation):
    relation.join(
        permission_role_table,
        permission_role_table.c.permission_id == permissions_table.c.id,
    )
    relation.add_columns(permission_role_table.c.role_id.label('role_key'))

def role_permissions_base(relation):
    _join_permission_role(relation)
    relation.where(permission_role_table.c.role_id == relation.parent.id)

def role_permissions_eager(relation, roles):
    _join_permission_role(relation)
    relation.where_in(permission_role_table.c.role_id, relation.get_keys(roles))

def role_permissions_matcher(roles, permissions, name, relation):
    return match_many(roles, permissions, name, relation, 'id', 'role_key')

# users -> permissions, through both pivots
def _join_user_permissions(relation):
    relation.join(
        permission_role_table,
        permission_role_table.c.permission_id == permissions_table.c.id,
    )
    relation.join(
        role_user_table,
        role_user_table.c.role_id == permission_role_table.c.role_id,
    )
    relation.add_columns(role_user_table.c.user_id.label('user_key'))
    relation.distinct()

def user_permissions_base(relation):
    _join_user_permissions(relation)
    relation.where(role_user_table.c.user_id == relation.parent.id)

def user_permissions_eager(relation, users):
    _join_user_permissions(relation)
    relation.where_in(role_user_table.c.user_id, relation.get_keys(users))

def user_permissions_matcher(users, permissions, name, relation):
    return match_many(users, permissions, name, relation, 'id', 'user_key')


@register_record
class Permission(Record):
    table = permissions_table


@register_record('role')
class Role(CustomRelations, Record):
    table = roles_table

    @relation
    def permissions(self):
        # by tag, resolved through the registry
        return self.custom_relation(
            'Permission',
            role_permissions_base,
            role_permissions_eager,
            role_permissions_matcher,
        )


class User(CustomRelations, Record):
    table = users_table

    @relation
    def roles(self):
        return self.custom_relation(
            'role',
            user_roles_base,
            user_roles_eager,
            user_roles_matcher,
        )

    @relation
    def permissions(self):
        return self.custom_relation(
            Permission,
            user_permissions_base,
            user_permissions_eager,
            user_permissions_matcher,
        )


record_types = [User, Role, Permission]

def seed(db):
    '''
    u1 -- r1 -- p1, p2
    u2 -- r2 -- p2
    u3 (no roles)
    '''
    db.insert({
        users_table: [
            {'id': 1, 'name': 'u1'},
            {'id': 2, 'name': 'u2'},
            {'id': 3, 'name': 'u3'},
        ],
        roles_table: [
            {'id': 1, 'name': 'r1'},
            {'id': 2, 'name': 'r2'},
        ],
        permissions_table: [
            {'id': 1, 'name': 'p1'},
            {'id': 2, 'name': 'p2'},
        ],
        role_user_table: [
            {'id': 1, 'user_id': 1, 'role_id': 1},
            {'id': 2, 'user_id': 2, 'role_id': 2},
        ],
        permission_role_table: [
            {'id': 1, 'permission_id': 1, 'role_id': 1},
            {'id': 2, 'permission_id': 2, 'role_id': 1},
            {'id': 3, 'permission_id': 2, 'role_id': 2},
        ],
    })
