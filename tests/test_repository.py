import pytest

from conftest import FailingStore, make_table
from wedding_seat_manager.exceptions import FetchError
from wedding_seat_manager.models import TableStatus, occupancy, status_label
from wedding_seat_manager.repository import TableRepository
from wedding_seat_manager.store import InMemorySeatStore


def _seat(repo, seat_id):
    for table in repo.load_all():
        seat = table.find_seat(seat_id)
        if seat is not None:
            return table, seat
    raise AssertionError(seat_id)


def test_load_all_sorted_by_label(store):
    labels = [t.label for t in TableRepository(store).load_all()]
    assert labels == sorted(labels)


def test_assign_resets_presence(store):
    repo = TableRepository(store)
    store.update_seat("table-1-s3", {"is_present": True})
    before, _ = _seat(repo, "table-1-s3")
    repo.set_guest_name("table-1-s3", "Zoe")
    table, seat = _seat(repo, "table-1-s3")
    assert seat.guest_name == "Zoe"
    assert seat.status == "absent"
    assert occupancy(table) == occupancy(before) + 1


def test_rename_also_resets_presence(store):
    repo = TableRepository(store)
    _, bob = _seat(repo, "table-1-s2")
    assert bob.status == "present"
    repo.set_guest_name(bob.id, "Robert", editing=True)
    _, seat = _seat(repo, bob.id)
    assert seat.guest_name == "Robert"
    assert seat.status == "absent"


def test_set_presence_keeps_guest(store):
    repo = TableRepository(store)
    repo.set_presence("table-1-s2", False)
    table, seat = _seat(repo, "table-1-s2")
    assert seat.guest_name == "Bob"
    assert seat.status == "absent"
    assert occupancy(table) == 2


def test_clear_only_guest_empties_table():
    store = InMemorySeatStore.from_tables([make_table("Table 9", ["Solo"], present=["Solo"])])
    repo = TableRepository(store)
    repo.clear_guest("table-9-s1")
    table, seat = _seat(repo, "table-9-s1")
    assert occupancy(table) == 0
    assert status_label(table) is TableStatus.EMPTY
    assert seat.guest_name is None and seat.is_present is False


def test_clear_is_idempotent(store):
    repo = TableRepository(store)
    repo.clear_guest("table-3-s1")
    repo.clear_guest("table-3-s1")
    _, seat = _seat(repo, "table-3-s1")
    assert seat.guest_name is None
    assert seat.status == "absent"


def test_blank_name_rejected(store):
    with pytest.raises(ValueError):
        TableRepository(store).set_guest_name("table-3-s1", "   ")


def test_toggle_presence_ignores_empty_seat(store):
    repo = TableRepository(store)
    _, empty = _seat(repo, "table-3-s1")
    assert repo.toggle_presence(empty) is False
    _, alice = _seat(repo, "table-1-s1")
    assert repo.toggle_presence(alice) is True
    assert _seat(repo, "table-1-s1")[1].status == "present"


class TestFailures:
    def test_load_failure_raises_fetch_error(self):
        repo = TableRepository(FailingStore(fail_fetch=True))
        with pytest.raises(FetchError) as info:
            repo.load_all()
        assert isinstance(info.value.__cause__, ConnectionError)

    def test_update_failure_raises_fetch_error(self, tables):
        store = InMemorySeatStore.from_tables(tables)
        failing = FailingStore(store.fetch_tables(), fail_update=True)
        with pytest.raises(FetchError):
            TableRepository(failing).clear_guest("table-1-s1")

    def test_unknown_seat_raises_fetch_error(self, store):
        with pytest.raises(FetchError):
            TableRepository(store).set_presence("missing", True)
