from corel import Relation

from setups.logs import selects
from setups.clients import Client, Contact


def contact_names(client):
    return sorted(c.name for c in client.contacts)


def test_eager_dual_key_match(db):
    clients = Client.query().order_by('id').get()

    with db.statement_log() as log:
        clients.load('contacts')

    assert len(selects(log)) == 1

    acme, globex, initech, hooli = clients
    # client_id=5 matches even though the contact's crm_id differs
    assert contact_names(acme) == ['k1']
    # k2 matches on crm_id alone; k3 on both keys, attached once
    assert contact_names(globex) == ['k2', 'k3']
    assert contact_names(initech) == ['k4']
    assert contact_names(hooli) == []

def test_lazy_dual_key_matches_eager(db):
    eager = Client.query().order_by('id').get().load('contacts')
    lazy  = Client.query().order_by('id').get()

    for e, l in zip(eager, lazy):
        assert contact_names(e) == contact_names(l)

def test_null_keys_never_match(db):
    # initech has no client_id, hooli no crm_id; neither may pick up contacts that are
    # also missing that key
    clients = Client.query().where_in('id', [3, 4]).order_by('id').get()
    clients.load('contacts')

    initech, hooli = clients
    assert [c.name for c in initech.contacts] == ['k4']
    assert list(hooli.contacts) == []

def test_eager_constraint_is_safe_to_repeat(db):
    clients = Client.query().order_by('id').get()

    once = Relation.unconstrained(lambda: clients[0].relation('contacts'))
    once.add_eager_constraints(clients)

    twice = Relation.unconstrained(lambda: clients[0].relation('contacts'))
    twice.add_eager_constraints(clients)
    twice.add_eager_constraints(clients)

    def ids(relation):
        return sorted(c.id for c in relation.get_eager())

    assert ids(once) == ids(twice) != []

def test_base_constraint_is_safe_to_repeat(db):
    globex = Client.query().where(id=2).first()

    relation = globex.relation('contacts')
    before = sorted(c.id for c in relation.get_results())

    relation = globex.relation('contacts')
    relation.add_constraints()
    after = sorted(c.id for c in relation.get_results())

    assert before == after == [2, 3]

def test_contacts_are_contact_records(db):
    acme = Client.query().where(id=1).first()
    assert all(isinstance(c, Contact) for c in acme.contacts)
