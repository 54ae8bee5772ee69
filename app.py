"""Streamlit UI for the wedding seat manager: login, dashboard, about."""
from __future__ import annotations

# Add src to sys.path so wedding_seat_manager can be found
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

import streamlit as st
import streamlit.components.v1 as components

from wedding_seat_manager.auth import Authenticator, Role
from wedding_seat_manager.config import get_settings
from wedding_seat_manager.csv_loader import table_summary_frame, tables_to_frame
from wedding_seat_manager.exceptions import LoginError
from wedding_seat_manager.logging_config import configure_logging
from wedding_seat_manager.models import (
    TABLE_CAPACITY,
    FilterType,
    Table,
    ViewMode,
    fill_percentage,
    occupancy,
    status_label,
)
from wedding_seat_manager.repository import TableRepository
from wedding_seat_manager.seating_map import generate_seating_map
from wedding_seat_manager.session import AppSession
from wedding_seat_manager.store import build_store
from wedding_seat_manager.view_state import ViewState
from wedding_seat_manager.workflow import GuestAssignmentWorkflow, WorkflowState

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

st.set_page_config(page_title="Wedding Seat Manager", layout="wide")

FILTER_LABELS = {
    FilterType.ALL: "All tables",
    FilterType.AVAILABLE: "Available",
    FilterType.TAKEN: "Fully seated",
}

# -----------------------------
# Shared objects
# -----------------------------

@st.cache_resource
def get_store():
    """One store per server process."""
    return build_store(settings)


def get_session() -> AppSession:
    return AppSession.load(st.session_state)


def get_view_state() -> ViewState:
    if "view_state" not in st.session_state:
        vs = ViewState(page_size=settings.PAGE_SIZE)
        vs.set_view_mode(get_session().view_mode)
        st.session_state["view_state"] = vs
    return st.session_state["view_state"]


def get_workflow() -> GuestAssignmentWorkflow:
    if "workflow" not in st.session_state:
        st.session_state["workflow"] = GuestAssignmentWorkflow(
            TableRepository(get_store()), get_view_state()
        )
    return st.session_state["workflow"]


def go_to(page: str) -> None:
    st.query_params["page"] = page

# -----------------------------
# Callbacks
# -----------------------------

def on_logout() -> None:
    session = get_session()
    session.logout()
    session.save(st.session_state)
    for key in ("view_state", "workflow"):
        st.session_state.pop(key, None)
    go_to("login")


def on_filter_change() -> None:
    get_view_state().set_filter(FilterType(st.session_state["filter_select"]))


def on_search_change() -> None:
    get_view_state().set_search(st.session_state["search_input"])


def on_view_mode_change() -> None:
    mode = ViewMode(st.session_state["view_mode_radio"])
    get_view_state().set_view_mode(mode)
    session = get_session()
    session.set_view_mode(mode)
    session.save(st.session_state)


def on_reset_filters() -> None:
    vs = get_view_state()
    vs.reset_filters()
    vs.clear_search()
    st.session_state["filter_select"] = FilterType.ALL.value
    st.session_state["search_input"] = ""


def on_quick_result(seat_id: str) -> None:
    get_workflow().open_from_search(seat_id)
    st.session_state["search_input"] = ""


def on_begin_assign(seat_id: str) -> None:
    wf = get_workflow()
    wf.begin_assign(seat_id)
    st.session_state["guest_input"] = wf.guest_input


def on_begin_edit(seat_id: str) -> None:
    wf = get_workflow()
    wf.begin_edit(seat_id)
    st.session_state["guest_input"] = wf.guest_input


def on_save_guest() -> None:
    wf = get_workflow()
    wf.set_input(st.session_state.get("guest_input", ""))
    wf.submit()

# -----------------------------
# Views
# -----------------------------

def render_login() -> None:
    st.title("Wedding Seat Manager")
    st.caption("Please enter your credentials to continue")
    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login")
    if submitted:
        if not username or not password:
            st.error("Invalid username or password")
            return
        authenticator = Authenticator.from_settings(get_store(), settings)
        try:
            with st.spinner("Authenticating..."):
                role, session_id = authenticator.login(username, password)
        except LoginError as e:
            st.error(e.message)
            return
        session = get_session()
        session.login(role is Role.ADMIN, session_id)
        session.save(st.session_state)
        go_to("dashboard")
        st.rerun()
    st.markdown(f"Having trouble logging in? [Contact support](mailto:{settings.SUPPORT_EMAIL})")


def render_table_panel(wf: GuestAssignmentWorkflow) -> None:
    """Management panel for the open table."""
    table = wf.table
    if table is None:
        return
    busy = wf.is_submitting
    with st.container(border=True):
        head, close = st.columns([5, 1])
        head.subheader(f"Manage {table.label}")
        close.button("Close", key="close_panel", on_click=wf.close, disabled=busy)

        for seat in table.seats:
            info, actions = st.columns([3, 4])
            if seat.is_assigned:
                info.markdown(f"**Seat {seat.seat_no}** · {seat.guest_name} `{seat.status}`")
                a1, a2, a3 = actions.columns(3)
                a1.button(
                    "✓ Present" if seat.status != "present" else "✗ Absent",
                    key=f"presence_{seat.id}",
                    on_click=wf.toggle_presence,
                    args=(seat.id,),
                    disabled=busy or wf.state is WorkflowState.CONFIRMING_REMOVAL,
                )
                a2.button("Edit", key=f"edit_{seat.id}", on_click=on_begin_edit, args=(seat.id,),
                          disabled=busy or wf.state is WorkflowState.CONFIRMING_REMOVAL)
                a3.button("Remove", key=f"remove_{seat.id}", on_click=wf.request_removal, args=(seat.id,),
                          disabled=busy or wf.state is WorkflowState.CONFIRMING_REMOVAL)
            else:
                info.markdown(f"**Seat {seat.seat_no}** · _Unassigned_")
                actions.button("Assign", key=f"assign_{seat.id}", on_click=on_begin_assign, args=(seat.id,),
                               disabled=busy or wf.state is WorkflowState.CONFIRMING_REMOVAL)

        if wf.state is WorkflowState.SEAT_EDITING and wf.active_seat is not None:
            verb = "Edit guest" if wf.editing_existing else "Assign guest"
            st.text_input(f"{verb} to Seat {wf.active_seat.seat_no}", key="guest_input",
                          placeholder="Enter guest name", disabled=busy)
            s1, s2 = st.columns(2)
            s1.button("Save", key="save_guest", on_click=on_save_guest,
                      disabled=busy or not st.session_state.get("guest_input", "").strip())
            s2.button("Cancel", key="cancel_edit", on_click=wf.cancel_edit, disabled=busy)

        if wf.state is WorkflowState.CONFIRMING_REMOVAL:
            st.warning("Remove this guest from the seat? This cannot be undone.")
            c1, c2 = st.columns(2)
            c1.button("Confirm", key="confirm_remove", on_click=wf.confirm_removal, disabled=busy)
            c2.button("Cancel", key="cancel_remove", on_click=wf.cancel_removal, disabled=busy)


def render_table_card(table: Table) -> None:
    filled = occupancy(table)
    with st.container(border=True):
        st.markdown(f"**{table.label}** · {filled}/{TABLE_CAPACITY}")
        st.progress(fill_percentage(table) / 100)
        st.caption(f"{filled} {'seat' if filled == 1 else 'seats'} occupied")
        st.button("Manage", key=f"manage_{table.id}", on_click=get_workflow().open_table,
                  args=(table,), use_container_width=True)


def render_dashboard() -> None:
    vs = get_view_state()
    wf = get_workflow()

    head, about, logout = st.columns([6, 1, 1])
    head.title("Seating Dashboard")
    about.button("About", on_click=go_to, args=("about",))
    logout.button("Logout", on_click=on_logout)

    if not vs.loaded:
        with st.spinner("Loading tables..."):
            ok = wf.refresh()
        if not ok:
            st.warning("Could not load tables.")
            st.button("Retry", key="retry_load")
            return

    if settings.SHOW_MUTATION_ERRORS and wf.last_error:
        st.warning(wf.last_error)

    # Controls
    st.session_state.setdefault("filter_select", vs.filter.value)
    st.session_state.setdefault("view_mode_radio", vs.view_mode.value)
    c_search, c_filter, c_mode = st.columns([3, 2, 2])
    c_search.text_input("Search guests", key="search_input", on_change=on_search_change,
                        placeholder="Search guests...")
    c_filter.selectbox(
        "Filter",
        options=[f.value for f in FilterType],
        format_func=lambda v: FILTER_LABELS[FilterType(v)],
        key="filter_select",
        on_change=on_filter_change,
    )
    c_mode.radio("View", options=[m.value for m in ViewMode], key="view_mode_radio", horizontal=True,
                 on_change=on_view_mode_change)

    results = vs.quick_results
    if vs.search_query and results:
        with st.container(border=True):
            st.caption(f"Found {len(results)} guests")
            for table, seat in results:
                st.button(f"{seat.guest_name} · {table.label}, Seat {seat.seat_no}",
                          key=f"quick_{seat.id}", on_click=on_quick_result, args=(seat.id,))

    count = len(vs.filtered_tables)
    st.caption(f"{count} {'table' if count == 1 else 'tables'} found · {vs.guest_count} guests seated")

    if wf.is_open:
        render_table_panel(wf)

    visible = vs.visible_tables
    if not visible:
        st.info("No tables match your current filters")
        st.button("Reset filters", on_click=on_reset_filters)
    elif vs.view_mode is ViewMode.GRID:
        cols = st.columns(4)
        for i, table in enumerate(visible):
            with cols[i % 4]:
                render_table_card(table)
    else:
        st.dataframe(table_summary_frame(visible), use_container_width=True, hide_index=True)
        for table in visible:
            label, status, manage = st.columns([3, 2, 1])
            label.write(f"{table.label} · {occupancy(table)}/{TABLE_CAPACITY}")
            status.write(status_label(table).value)
            manage.button("Manage", key=f"manage_{table.id}", on_click=wf.open_table, args=(table,))

    if count:
        p1, p2, p3 = st.columns([1, 2, 1])
        p1.button("Previous", on_click=vs.previous_page, disabled=not vs.has_previous)
        p2.write(f"Page {vs.page} of {max(1, vs.page_count)}")
        p3.button("Next", on_click=vs.next_page, disabled=not vs.has_next)

    with st.expander("Seating map"):
        components.html(generate_seating_map(vs.filtered_tables), height=720, scrolling=True)

    csv_bytes = tables_to_frame(vs.tables).to_csv(index=False).encode("utf-8")
    st.download_button("Download seating chart as CSV", csv_bytes, file_name="seating.csv")


def render_about() -> None:
    st.title("About")
    st.write(
        "Wedding Seat Manager keeps the seating chart for the event: assign guests "
        "to the eight seats of each table, track who has arrived, and find any "
        "guest by name."
    )
    st.button("Back to Dashboard", on_click=go_to, args=("dashboard",))


def render_not_found() -> None:
    st.title("Page not found")
    st.write("The page you are looking for does not exist.")
    st.button("Go to Dashboard", on_click=go_to, args=("dashboard",))

# -----------------------------
# Routing
# -----------------------------

page = st.query_params.get("page", "dashboard")
session = get_session()

if page == "login":
    if session.is_authenticated:
        go_to("dashboard")
        st.rerun()
    render_login()
elif page in ("dashboard", "about"):
    if not session.is_authenticated:
        render_login()
    elif page == "about":
        render_about()
    else:
        render_dashboard()
else:
    render_not_found()
