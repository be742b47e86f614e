# ui/common.py
import asyncio

import streamlit as st

from controllers.collection import CollectionViewController, ViewStatus
from controllers.dashboard import Dashboard
from models import EntityKind

KIND_ICONS = {
    EntityKind.TEAMS: "👥",
    EntityKind.PROJECTS: "📁",
    EntityKind.TASKS: "✅",
    EntityKind.USERS: "🧑",
}


def force_rerun():
    fn = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if fn:
        fn()


def run(coro):
    """Drive one dashboard coroutine to completion inside the current rerun."""
    return asyncio.run(coro)


def get_dashboard() -> Dashboard:
    return st.session_state["dashboard"]


def render_search(dash: Dashboard, kind: EntityKind, placeholder: str = "Search..."):
    view = dash.views[kind]
    key = f"search_{kind.value}"
    term = st.text_input("Search", value=view.requested_search, key=key,
                         placeholder=placeholder, label_visibility="collapsed")
    # one request per edit; a failed search is not retried on every rerun
    if term != view.requested_search:
        run(dash.search(kind, term))
        force_rerun()


def render_view_status(view: CollectionViewController) -> bool:
    """Show loading/error banners; False when there is nothing to draw yet."""
    if view.status is ViewStatus.ERROR:
        st.warning(f"Showing the last loaded page. Refresh failed: {view.error}")
    if view.status is ViewStatus.UNLOADED:
        st.info("Loading…")
        return False
    return True


def render_pagination(dash: Dashboard, kind: EntityKind, view: CollectionViewController = None,
                      key_prefix: str = ""):
    view = view or dash.views[kind]
    w = view.window
    c1, c2, c3 = st.columns([1, 3, 1])
    with c1:
        if st.button("◀ Prev", key=f"{key_prefix}prev_{kind.value}", disabled=not w.has_previous,
                     use_container_width=True):
            run(view.go_to(w.current_page - 1))
            force_rerun()
    with c2:
        st.caption(
            f"Showing {w.first_item}–{w.last_item} of {w.total_items} · "
            f"page {w.current_page} of {max(w.total_pages, 1)}"
        )
    with c3:
        if st.button("Next ▶", key=f"{key_prefix}next_{kind.value}", disabled=not w.has_next,
                     use_container_width=True):
            run(view.go_to(w.current_page + 1))
            force_rerun()


def row_actions(dash: Dashboard, kind: EntityKind, record, extra=None):
    """Edit / delete buttons (plus an optional extra button) for one row."""
    cols = st.columns(3 if extra else 2)
    with cols[0]:
        if st.button("✏️ Edit", key=f"edit_{kind.value}_{record.id}", use_container_width=True):
            dash.open_form(kind, record)
            force_rerun()
    with cols[1]:
        if st.button("🗑 Delete", key=f"del_{kind.value}_{record.id}", use_container_width=True):
            dash.request_delete(kind, record)
            force_rerun()
    if extra:
        with cols[2]:
            extra()


def render_table_view(kind: EntityKind, df) -> bool:
    """Optional compact table of the current page, with a CSV download."""
    if not st.toggle("Table view", key=f"table_{kind.value}"):
        return False
    st.dataframe(df, hide_index=True, use_container_width=True)
    st.download_button("⬇️ Download page as CSV", df.to_csv(index=False).encode("utf-8"),
                       file_name=f"{kind.value}.csv", mime="text/csv", key=f"csv_{kind.value}")
    return True
