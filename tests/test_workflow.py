import pytest

from conftest import FailingStore, make_table
from wedding_seat_manager.exceptions import WorkflowError
from wedding_seat_manager.models import FilterType, occupancy
from wedding_seat_manager.repository import TableRepository
from wedding_seat_manager.store import InMemorySeatStore
from wedding_seat_manager.view_state import ViewState
from wedding_seat_manager.workflow import GuestAssignmentWorkflow, WorkflowState


@pytest.fixture
def workflow(store):
    wf = GuestAssignmentWorkflow(TableRepository(store), ViewState())
    assert wf.refresh()
    return wf


def _open(wf, table_id):
    wf.open_table(wf.view_state.table_by_id(table_id))


def test_open_resets_seat_selection(workflow):
    _open(workflow, "table-1")
    workflow.begin_assign("table-1-s3")
    workflow.set_input("Zoe")
    _open(workflow, "table-3")
    assert workflow.state is WorkflowState.TABLE_SELECTED
    assert workflow.active_seat_id is None
    assert workflow.guest_input == ""


def test_assign_flow_closes_on_success(workflow):
    _open(workflow, "table-1")
    workflow.begin_assign("table-1-s3")
    assert workflow.guest_input == ""
    workflow.set_input("Zoe")
    assert workflow.submit() is True
    assert workflow.state is WorkflowState.CLOSED
    table = workflow.view_state.table_by_id("table-1")
    assert occupancy(table) == 3
    assert table.find_seat("table-1-s3").status == "absent"


def test_edit_prefills_name(workflow):
    _open(workflow, "table-1")
    workflow.begin_edit("table-1-s2")
    assert workflow.editing_existing
    assert workflow.guest_input == "Bob"
    workflow.set_input("Bobby")
    assert workflow.submit()
    seat = workflow.view_state.table_by_id("table-1").find_seat("table-1-s2")
    assert seat.guest_name == "Bobby"
    assert seat.status == "absent"


def test_blank_submit_is_noop(workflow):
    _open(workflow, "table-3")
    workflow.begin_assign("table-3-s1")
    workflow.set_input("   ")
    assert not workflow.can_submit()
    assert workflow.submit() is False
    assert workflow.state is WorkflowState.SEAT_EDITING


def test_cancel_edit_returns_to_table(workflow):
    _open(workflow, "table-3")
    workflow.begin_assign("table-3-s1")
    workflow.cancel_edit()
    assert workflow.state is WorkflowState.TABLE_SELECTED


def test_assign_on_taken_seat_rejected(workflow):
    _open(workflow, "table-1")
    with pytest.raises(WorkflowError):
        workflow.begin_assign("table-1-s1")
    with pytest.raises(WorkflowError):
        workflow.begin_edit("table-1-s5")


def test_removal_requires_confirmation(workflow):
    _open(workflow, "table-1")
    workflow.request_removal("table-1-s1")
    assert workflow.state is WorkflowState.CONFIRMING_REMOVAL
    workflow.cancel_removal()
    assert workflow.state is WorkflowState.TABLE_SELECTED
    assert occupancy(workflow.view_state.table_by_id("table-1")) == 2

    workflow.request_removal("table-1-s1")
    assert workflow.confirm_removal()
    assert workflow.state is WorkflowState.CLOSED
    assert occupancy(workflow.view_state.table_by_id("table-1")) == 1


def test_toggle_presence_keeps_dialog_open(workflow):
    _open(workflow, "table-1")
    assert workflow.toggle_presence("table-1-s2")
    assert workflow.state is WorkflowState.TABLE_SELECTED
    seat = workflow.table.find_seat("table-1-s2")
    assert seat.guest_name == "Bob"
    assert seat.status == "absent"
    assert occupancy(workflow.table) == 2


def test_toggle_presence_on_empty_seat_rejected(workflow):
    _open(workflow, "table-3")
    with pytest.raises(WorkflowError):
        workflow.toggle_presence("table-3-s1")


def test_actions_rejected_when_closed(workflow):
    with pytest.raises(WorkflowError):
        workflow.begin_assign("table-3-s1")
    with pytest.raises(WorkflowError):
        workflow.submit()


def test_actions_rejected_while_submitting(workflow):
    _open(workflow, "table-1")
    workflow.state = WorkflowState.SUBMITTING
    with pytest.raises(WorkflowError):
        workflow.close()
    with pytest.raises(WorkflowError):
        workflow.toggle_presence("table-1-s1")


def test_open_from_search(workflow):
    workflow.view_state.set_search("ivy")
    table = workflow.open_from_search("table-2-s7")
    assert table.id == "table-2"
    assert workflow.state is WorkflowState.TABLE_SELECTED
    assert workflow.view_state.search_query == ""


class TestFailures:
    def _failing_workflow(self, tables):
        records = InMemorySeatStore.from_tables(tables).fetch_tables()
        store = FailingStore(records)
        wf = GuestAssignmentWorkflow(TableRepository(store), ViewState())
        assert wf.refresh()
        store.fail_update = True
        return wf, store

    def test_failed_submit_restores_editor(self, tables):
        wf, _ = self._failing_workflow(tables)
        _open(wf, "table-3")
        wf.begin_assign("table-3-s1")
        wf.set_input("Zoe")
        assert wf.submit() is False
        assert wf.state is WorkflowState.SEAT_EDITING
        assert wf.guest_input == "Zoe"
        assert wf.last_error
        assert occupancy(wf.view_state.table_by_id("table-3")) == 0

    def test_failed_removal_returns_to_table(self, tables):
        wf, _ = self._failing_workflow(tables)
        _open(wf, "table-1")
        wf.request_removal("table-1-s1")
        assert wf.confirm_removal() is False
        assert wf.state is WorkflowState.TABLE_SELECTED
        assert wf.pending_removal_id is None

    def test_failed_reload_keeps_previous_tables(self, tables):
        wf, store = self._failing_workflow(tables)
        store.fail_fetch = True
        assert wf.refresh() is False
        assert len(wf.view_state.tables) == 3
        assert wf.last_error


def test_filling_last_table_on_page_two_returns_to_page_one():
    tables = [make_table(f"Table {i:02d}") for i in range(1, 25)]
    tables.append(make_table("Table 25", [f"G{i}" for i in range(7)]))
    wf = GuestAssignmentWorkflow(TableRepository(InMemorySeatStore.from_tables(tables)), ViewState())
    assert wf.refresh()
    wf.view_state.set_filter(FilterType.AVAILABLE)
    wf.view_state.next_page()
    assert [t.label for t in wf.view_state.visible_tables] == ["Table 25"]

    _open(wf, "table-25")
    wf.begin_assign("table-25-s8")
    wf.set_input("Last Guest")
    assert wf.submit()
    assert wf.view_state.page <= max(1, wf.view_state.page_count)
    assert wf.view_state.page == 1
    assert len(wf.view_state.visible_tables) == 24


def test_toggle_presence_goes_through_repository(workflow, monkeypatch):
    toggled = []
    original = workflow.repository.toggle_presence

    def record(seat):
        toggled.append(seat.id)
        return original(seat)

    monkeypatch.setattr(workflow.repository, "toggle_presence", record)
    _open(workflow, "table-1")
    assert workflow.toggle_presence("table-1-s1")
    assert toggled == ["table-1-s1"]
    assert workflow.table.find_seat("table-1-s1").status == "present"
