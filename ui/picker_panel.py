# ui/picker_panel.py
import streamlit as st

from controllers.dashboard import Dashboard
from controllers.mutations import TaskAssignment
from models import EntityKind
from ui.common import force_rerun, render_pagination, render_view_status, run
from utils.formatting import role_label, short_id


def render_user_picker(dash: Dashboard):
    """Select-a-user surface shared by task reassignment and team membership."""
    picker = dash.picker
    if not picker.is_open:
        return
    title = "Reassign task" if isinstance(picker.context, TaskAssignment) else "Add user to team"

    with st.container(border=True):
        h1, h2 = st.columns([5, 1])
        h1.subheader(title)
        if h2.button("✖", key="picker_close"):
            dash.close_picker()
            force_rerun()

        term = st.text_input("Search by name or email…", value=picker.requested_search, key="picker_search")
        if term != picker.requested_search:
            run(picker.search(term))
            force_rerun()

        if not render_view_status(picker):
            return
        if not picker.items:
            st.info("No users found")
            return

        for user in picker.items:
            current = user.id == picker.highlighted_id
            label = f"{'✔ ' if current else ''}{user.name} · {user.email} · {role_label(user.role)}"
            if user.team_id:
                label += f" · Team {short_id(user.team_id)}"
            if st.button(label, key=f"pick_{user.id}", use_container_width=True,
                         type="primary" if current else "secondary"):
                run(dash.pick(user.id))
                force_rerun()

        render_pagination(dash, EntityKind.USERS, view=picker, key_prefix="picker_")
