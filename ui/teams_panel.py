# ui/teams_panel.py
import streamlit as st

from controllers.dashboard import Dashboard
from controllers.mutations import TeamAssignment
from controllers.resolver import ParentKind
from models import EntityKind
from ui.common import (
    force_rerun, render_pagination, render_search, render_table_view, render_view_status,
    row_actions, run,
)
from utils.formatting import format_date, short_id
from utils.tables import teams_df, users_df


def render_team_members(dash: Dashboard, team, key_prefix: str = ""):
    """Expand/collapse toggle for a team row and, when open, its users."""
    expanded = dash.is_expanded(ParentKind.TEAM, team.id)
    label = "▾ Members" if expanded else "▸ Members"
    if st.button(label, key=f"{key_prefix}team_toggle_{team.id}"):
        run(dash.toggle_row(ParentKind.TEAM, team.id))
        force_rerun()
    if not expanded:
        return
    users = run(dash.expanded_children(ParentKind.TEAM, team.id)) or []
    if users:
        st.caption(f"Users in {team.name}")
        st.dataframe(users_df(users), hide_index=True, use_container_width=True)
    else:
        st.caption("No users in this team")


def render_teams_panel(dash: Dashboard):
    kind = EntityKind.TEAMS
    view = dash.views[kind]
    st.subheader("All Teams")
    render_search(dash, kind, placeholder="Search teams by name…")
    if not render_view_status(view):
        return
    if not view.items:
        st.info("No teams found")
        return
    if render_table_view(kind, teams_df(view.items)):
        render_pagination(dash, kind)
        return

    for team in view.items:
        with st.container(border=True):
            c1, c2, c3 = st.columns([3, 2, 2])
            c1.markdown(f"**{team.name}**")
            c2.caption(f"Project {short_id(team.project_id)}")
            c3.caption(f"Created {format_date(team.created_at)}")

            def add_member(team=team):
                if st.button("➕ Add member", key=f"assign_team_{team.id}", use_container_width=True):
                    run(dash.open_picker(TeamAssignment(team_id=team.id)))
                    force_rerun()

            row_actions(dash, kind, team, extra=add_member)
            render_team_members(dash, team)

    render_pagination(dash, kind)
