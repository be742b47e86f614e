# ui/dialogs.py
import streamlit as st

from controllers.dashboard import Dashboard
from ui.common import force_rerun, run


def render_delete_confirmation(dash: Dashboard):
    request = dash.pending_delete
    if request is None:
        return
    with st.container(border=True):
        st.warning(f"Delete {request.kind.singular} **{request.label}**? This cannot be undone.")
        c1, c2 = st.columns(2)
        if c1.button("Yes, delete", key="confirm_delete", type="primary", use_container_width=True):
            run(dash.confirm_delete())
            force_rerun()
        if c2.button("Cancel", key="cancel_delete", use_container_width=True):
            dash.cancel_delete()
            force_rerun()


def render_notices(dash: Dashboard):
    """Blocking error notice (must be dismissed) and one-shot success flash."""
    if dash.notice:
        with st.container(border=True):
            st.error(dash.notice)
            if st.button("OK", key="dismiss_notice"):
                dash.dismiss_notice()
                force_rerun()
    if dash.flash:
        st.success(dash.flash)
        dash.flash = None
