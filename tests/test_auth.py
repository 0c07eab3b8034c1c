import json

import pytest

from andro_print_service.auth import AuthGate
from andro_print_service.exceptions import UnauthorizedError, ForbiddenError
from andro_print_service.models import ClientRecord
from andro_print_service.storage import ClientStore, JsonFileStorage, MemoryStorage


@pytest.fixture
def clients():
    storage = MemoryStorage([
        ClientRecord(id='clt-aaaaaa', pin='111111').to_dict(),
        ClientRecord(id='clt-bbbbbb', pin='222222', enabled=False).to_dict(),
    ])
    return ClientStore(storage)


@pytest.fixture
def gate(clients):
    return AuthGate(clients, enabled=True)


def test_valid_credentials_yield_client(gate):
    client = gate.authorize('clt-aaaaaa', '111111')
    assert client.id == 'clt-aaaaaa'


@pytest.mark.parametrize('client_id, key', [
    (None, '111111'),
    ('clt-aaaaaa', None),
    ('', ''),
])
def test_missing_credentials_are_unauthorized(gate, client_id, key):
    with pytest.raises(UnauthorizedError):
        gate.authorize(client_id, key)


@pytest.mark.parametrize('client_id, key', [
    ('clt-zzzzzz', '111111'),  # unknown
    ('clt-bbbbbb', '222222'),  # disabled
    ('clt-aaaaaa', '999999'),  # wrong pin
])
def test_rejections_are_indistinguishable(gate, client_id, key):
    with pytest.raises(ForbiddenError) as exc:
        gate.authorize(client_id, key)

    assert exc.value.message == 'Client not allowed'
    assert exc.value.details == {}


@pytest.mark.parametrize('client_id, key', [
    (None, None),
    ('clt-aaaaaa', 'wrong'),
])
def test_disabled_gate_always_passes(clients, client_id, key):
    gate = AuthGate(clients, enabled=False)
    assert gate.authorize(client_id, key) is None


def test_client_disabled_by_string_flag_is_rejected():
    storage = MemoryStorage([{'id': 'clt-bbbbbb', 'pin': '222222', 'enabled': 'false'}])
    gate = AuthGate(ClientStore(storage), enabled=True)

    with pytest.raises(ForbiddenError):
        gate.authorize('clt-bbbbbb', '222222')


def test_corrupt_client_entry_does_not_break_the_gate(tmp_path):
    path = tmp_path / 'clients.json'
    path.write_text(json.dumps({'clients': [None, {'id': 'clt-aaaaaa', 'pin': '111111'}]}))
    gate = AuthGate(ClientStore(JsonFileStorage(path, 'clients')), enabled=True)

    assert gate.authorize('clt-aaaaaa', '111111').id == 'clt-aaaaaa'
    with pytest.raises(ForbiddenError):
        gate.authorize('clt-zzzzzz', '111111')
