# ui/users_panel.py
import streamlit as st

from controllers.dashboard import Dashboard
from models import EntityKind
from ui.common import (
    render_pagination, render_search, render_table_view, render_view_status, row_actions,
)
from utils.formatting import format_date, role_label, short_id
from utils.tables import users_df


def render_users_panel(dash: Dashboard):
    kind = EntityKind.USERS
    view = dash.views[kind]
    st.subheader("All Users")
    render_search(dash, kind, placeholder="Search by name or email…")
    if not render_view_status(view):
        return
    if not view.items:
        st.info("No users found")
        return
    if render_table_view(kind, users_df(view.items)):
        render_pagination(dash, kind)
        return

    for user in view.items:
        with st.container(border=True):
            c1, c2, c3, c4 = st.columns([3, 1, 1, 2])
            c1.markdown(f"**{user.name}** · {user.email}")
            c1.caption(f"ID: {short_id(user.id)}")
            c2.write(role_label(user.role))
            c3.caption(short_id(user.team_id))
            c4.caption(f"Joined {format_date(user.created_at)}")
            row_actions(dash, kind, user)

    render_pagination(dash, kind)
