# main.py

#============================================================#
#                       Taskdesk-PM                          #
#============================================================#
# Created     : 2026-10-19                                   #
# Version     : V1.0.0                                       #
#------------------------------------------------------------#
# Purpose     : Operator dashboard for the Taskdesk API:     #
#               teams, projects, tasks and users with        #
#               drill-downs, assignment and an assistant     #
#============================================================#

import logging

import streamlit as st

from api import SessionContext
from config import load_settings
from controllers.collection import ViewStatus
from controllers.dashboard import Dashboard
from models import EntityKind
from ui.chat_panel import render_chat_panel
from ui.common import force_rerun, run
from ui.dialogs import render_delete_confirmation, render_notices
from ui.forms import render_entity_form
from ui.picker_panel import render_user_picker
from ui.projects_panel import render_projects_panel
from ui.summary_panel import render_summary
from ui.tasks_panel import render_tasks_panel
from ui.teams_panel import render_teams_panel
from ui.users_panel import render_users_panel

st.set_page_config(
    page_title="Taskdesk - Project Manager",
    page_icon="🗂️",
    layout="wide",
    initial_sidebar_state="expanded",
)

settings = load_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("taskdesk")

PANELS = {
    EntityKind.TEAMS: render_teams_panel,
    EntityKind.PROJECTS: render_projects_panel,
    EntityKind.TASKS: render_tasks_panel,
    EntityKind.USERS: render_users_panel,
}


def full_screen_login():
    st.markdown("""
    <style>
      [data-testid="stSidebar"], [data-testid="baseButton-headerNoPadding"] { display:none!important; }
      .main > div { padding-top: 6vh !important; }
    </style>
    """, unsafe_allow_html=True)
    _, col, _ = st.columns([1, 2.2, 1])
    with col:
        st.markdown("<h2 style='text-align:center;'>🗂️ Taskdesk</h2>", unsafe_allow_html=True)
        st.caption(f"API: {settings.api_url}")
        with st.form("login_form", clear_on_submit=False):
            token = st.text_input("API token", value=settings.api_token or "", type="password")
            name = st.text_input("Your name (optional)")
            email = st.text_input("Your email (optional)", placeholder="you@example.com")
            user_id = st.text_input("Your user id (optional)",
                                    help="New teams are owned by this user.")
            submitted = st.form_submit_button("Sign in / Continue", use_container_width=True)
        if submitted:
            if not token:
                st.warning("Please enter an API token.")
                return
            session = SessionContext(
                settings.api_url,
                token,
                user={"id": user_id or None, "name": name, "email": email},
                timeout=settings.http_timeout,
            )
            st.session_state["dashboard"] = Dashboard(session, settings)
            logger.info(f"signed in as {email or name or 'anonymous operator'}")
            force_rerun()


dash = st.session_state.get("dashboard")
if dash is None or not dash.session.is_active:
    full_screen_login()
    st.stop()

run(dash.start())

with st.sidebar:
    user = dash.session.user
    st.caption(f"Signed in as **{user.get('email') or user.get('name') or 'operator'}**")
    if st.button("Log out", key="logout", use_container_width=True):
        dash.logout()
        st.session_state.pop("dashboard", None)
        force_rerun()
    st.markdown("---")

render_chat_panel(dash)

st.title("Dashboard")
render_notices(dash)
render_summary(dash)
render_entity_form(dash)
render_delete_confirmation(dash)
render_user_picker(dash)

if dash.active_view is not None:
    view = dash.views[dash.active_view]
    # a mutation elsewhere may have marked this page stale
    if view.status is not ViewStatus.ERROR and not view.loaded:
        run(view.open())
    st.markdown("---")
    PANELS[dash.active_view](dash)
