# ui/projects_panel.py

import streamlit as st

from controllers.dashboard import Dashboard
from controllers.resolver import ParentKind
from models import EntityKind
from ui.common import (
    force_rerun, render_pagination, render_search, render_table_view, render_view_status,
    row_actions, run,
)
from ui.teams_panel import render_team_members
from utils.formatting import format_date, or_placeholder
from utils.tables import projects_df

__all__ = ["render_projects_panel"]


def render_project_teams(dash: Dashboard, project):
    expanded = dash.is_expanded(ParentKind.PROJECT, project.id)
    if st.button("▾ Teams" if expanded else "▸ Teams", key=f"project_toggle_{project.id}"):
        run(dash.toggle_row(ParentKind.PROJECT, project.id))
        force_rerun()
    if not expanded:
        return
    teams = run(dash.expanded_children(ParentKind.PROJECT, project.id)) or []
    if not teams:
        st.caption("No teams in this project")
        return
    st.caption(f"Teams in {project.name}")
    for team in teams:
        with st.container(border=True):
            c1, c2 = st.columns([3, 2])
            c1.markdown(f"**{team.name}**")
            c2.caption(f"Created {format_date(team.created_at)}")
            render_team_members(dash, team, key_prefix=f"p{project.id}_")


def render_projects_panel(dash: Dashboard):
    """Projects with a drill-down into their teams and each team's users."""
    kind = EntityKind.PROJECTS
    view = dash.views[kind]
    st.subheader("All Projects")
    render_search(dash, kind, placeholder="Search projects…")
    if not render_view_status(view):
        return
    if not view.items:
        st.info("No projects found")
        return
    if render_table_view(kind, projects_df(view.items)):
        render_pagination(dash, kind)
        return

    for project in view.items:
        with st.container(border=True):
            c1, c2, c3 = st.columns([2, 4, 2])
            c1.markdown(f"**{project.name}**")
            c2.write(or_placeholder(project.description))
            c3.caption(f"Created {format_date(project.created_at)}")
            row_actions(dash, kind, project)
            render_project_teams(dash, project)

    render_pagination(dash, kind)
