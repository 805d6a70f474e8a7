import pytest

from helen.servers import (
    ServerAlreadyExistsError,
    ServerUsedError,
    get_all_stored_servers,
    get_available_servers,
    get_stored_server,
    new_stored_server,
    put_stored_server,
    remove_stored_server,
)
from helen.storage import Database

PASSWORD = "password"


@pytest.fixture
def db():
    database = Database()
    yield database
    database.close()


def test_new_stored_server_round_trip(db):
    server = new_stored_server(db, "first", "192.0.2.1:27015", PASSWORD)
    stored = get_all_stored_servers(db)
    assert stored == [server]
    assert stored[0].rcon_password == PASSWORD
    assert stored[0].used is False


def test_duplicate_address_rejected(db):
    new_stored_server(db, "first", "192.0.2.1:27015", PASSWORD)
    with pytest.raises(ServerAlreadyExistsError, match="server already exists"):
        new_stored_server(db, "second", "192.0.2.1:27015", PASSWORD)
    assert len(get_all_stored_servers(db)) == 1


def test_borrow_and_return(db):
    server = new_stored_server(db, "first", "192.0.2.1:27015", PASSWORD)
    other = new_stored_server(db, "second", "192.0.2.2:27015", PASSWORD)

    taken = get_stored_server(db, server.id)
    assert taken.used is True
    assert taken.address == server.address
    assert [s.id for s in get_available_servers(db)] == [other.id]

    with pytest.raises(ServerUsedError, match="server is being used"):
        get_stored_server(db, server.id)

    put_stored_server(db, server.address)
    assert [s.id for s in get_available_servers(db)] == [server.id, other.id]


def test_missing_server(db):
    with pytest.raises(LookupError):
        get_stored_server(db, 42)


def test_remove_stored_server(db):
    server = new_stored_server(db, "first", "192.0.2.1:27015", PASSWORD)
    keep = new_stored_server(db, "second", "192.0.2.2:27015", PASSWORD)
    remove_stored_server(db, server.address)
    assert [s.id for s in get_all_stored_servers(db)] == [keep.id]