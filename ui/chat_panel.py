# ui/chat_panel.py
import streamlit as st

from controllers.dashboard import Dashboard
from ui.common import force_rerun, run


def render_chat_panel(dash: Dashboard):
    chat = dash.chat
    with st.sidebar:
        st.subheader("✨ Assistant")
        for msg in chat.messages:
            with st.chat_message(msg.role):
                st.markdown(msg.content)
                if msg.sources:
                    with st.expander(f"Sources ({len(msg.sources)})"):
                        for src in msg.sources:
                            st.caption(f"{src.citation or src.entity_type} · score {src.score:.2f}")
                if msg.metadata is not None:
                    cached = " · cached" if msg.metadata.from_cache else ""
                    st.caption(f"{msg.metadata.processing_time:.0f} ms{cached}")

        with st.form("chat_form", clear_on_submit=True):
            query = st.text_area("Ask about your tasks, teams or projects", height=80)
            sent = st.form_submit_button("Send", use_container_width=True)
        if sent and query.strip():
            run(chat.ask(query))
            force_rerun()
        if chat.messages and st.button("New conversation", key="chat_reset"):
            chat.reset()
            force_rerun()
