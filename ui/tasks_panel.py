# ui/tasks_panel.py
import streamlit as st

from controllers.dashboard import Dashboard
from controllers.mutations import TaskAssignment
from controllers.resolver import ParentKind
from models import EntityKind
from ui.common import (
    force_rerun, render_pagination, render_search, render_table_view, render_view_status,
    row_actions, run,
)
from utils.charts import build_status_figure
from utils.formatting import format_date, role_label, status_label
from utils.tables import status_breakdown, tasks_df


def render_assignee(dash: Dashboard, task):
    expanded = dash.is_expanded(ParentKind.TASK, task.id)
    if st.button("▾ Assignee" if expanded else "▸ Assignee", key=f"task_toggle_{task.id}"):
        run(dash.toggle_row(ParentKind.TASK, task.id, assignee_id=task.assigned_to))
        force_rerun()
    if not expanded:
        return
    users = run(dash.expanded_children(ParentKind.TASK, task.id, assignee_id=task.assigned_to)) or []
    if not users:
        st.caption("User not found")
        return
    user = users[0]
    st.markdown(
        f"**Assigned to** {user.name} · {user.email} · {role_label(user.role)}"
        + (f" · Team {user.team_id}" if user.team_id else "")
    )


def render_tasks_panel(dash: Dashboard):
    kind = EntityKind.TASKS
    view = dash.views[kind]
    st.subheader("All Tasks")
    render_search(dash, kind, placeholder="Search tasks…")
    if not render_view_status(view):
        return
    if not view.items:
        st.info("No tasks found")
        return
    if render_table_view(kind, tasks_df(view.items)):
        render_pagination(dash, kind)
        return

    fig = build_status_figure(status_breakdown(view.items))
    if fig is not None:
        with st.expander("Status on this page", expanded=False):
            st.plotly_chart(fig, use_container_width=True, config={"displaylogo": False})

    for task in view.items:
        with st.container(border=True):
            c1, c2, c3 = st.columns([3, 1, 2])
            c1.markdown(f"🧩 **{task.title}**")
            if task.description:
                c1.caption(task.description)
            c2.write(status_label(task.status))
            c3.caption(f"Deadline {format_date(task.deadline)}")

            def reassign(task=task):
                if st.button("🔁 Reassign", key=f"assign_task_{task.id}", use_container_width=True):
                    run(dash.open_picker(TaskAssignment(task_id=task.id, current_user_id=task.assigned_to)))
                    force_rerun()

            row_actions(dash, kind, task, extra=reassign)
            render_assignee(dash, task)

    render_pagination(dash, kind)
