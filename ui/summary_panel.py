# ui/summary_panel.py
import streamlit as st

from controllers.dashboard import Dashboard
from models import EntityKind
from ui.common import KIND_ICONS, force_rerun, run
from utils.charts import build_counts_figure

CARD_BLURBS = {
    EntityKind.TEAMS: "Manage your teams",
    EntityKind.PROJECTS: "View your projects",
    EntityKind.TASKS: "Track your tasks",
    EntityKind.USERS: "People in your organization",
}


def render_summary(dash: Dashboard):
    """Count cards with Create / View buttons, one per collection."""
    counts = dash.counter.current
    if dash.counter.error:
        st.caption(f"⚠️ Counts may be out of date: {dash.counter.error}")

    cols = st.columns(len(EntityKind))
    for col, kind in zip(cols, EntityKind):
        with col:
            with st.container(border=True):
                st.metric(f"{KIND_ICONS[kind]} {kind.label}", counts.get(kind))
                st.caption(CARD_BLURBS[kind])
                b1, b2 = st.columns(2)
                if b1.button("Create", key=f"create_{kind.value}", use_container_width=True):
                    dash.open_form(kind)
                    force_rerun()
                viewing = dash.active_view is kind
                if b2.button("Hide" if viewing else "View", key=f"view_{kind.value}",
                             use_container_width=True):
                    if viewing:
                        dash.close_view()
                    else:
                        run(dash.open_view(kind))
                    force_rerun()

    with st.expander("Records per collection", expanded=False):
        st.plotly_chart(build_counts_figure(counts), use_container_width=True,
                        config={"displaylogo": False})
        if st.button("↻ Refresh counts", key="refresh_counts"):
            run(dash.counter.refresh())
            force_rerun()
