# ui/forms.py
from datetime import date

import streamlit as st
from pydantic import ValidationError as PydanticValidationError

from controllers.dashboard import Dashboard
from controllers.mutations import validation_message
from models import CREATE_MODELS, UPDATE_MODELS, EntityKind, TaskStatus, UserRole
from ui.common import force_rerun, run
from utils.formatting import STATUS_LABELS, ROLE_LABELS, parse_date

NO_CHOICE = ""


def _select_by_id(label, records, current, key, empty_label, fmt=lambda r: r.name):
    """Selectbox over records returning the chosen id ('' for none)."""
    ids = [NO_CHOICE] + [r.id for r in records]
    names = {r.id: fmt(r) for r in records}
    if current and current not in names:
        ids.append(current)  # keep an id that is not on the first page
        names[current] = current
    idx = ids.index(current) if current in ids else 0
    return st.selectbox(label, ids, index=idx, key=key,
                        format_func=lambda i: names.get(i, empty_label) if i else empty_label)


def _user_fields(dash: Dashboard, values: dict, is_update: bool) -> dict:
    teams = run(dash.load_options(EntityKind.TEAMS))
    roles = list(UserRole)
    data = {
        "email": st.text_input("Email *", value=values.get("email", "")),
        "password": st.text_input(
            "Password" + (" (leave blank to keep current)" if is_update else " *"),
            type="password",
        ),
        "name": st.text_input("Name *", value=values.get("name", "")),
        "role": st.selectbox("Role", roles, index=roles.index(values.get("role") or UserRole.MEMBER),
                             format_func=lambda r: ROLE_LABELS[r]),
        "team_id": _select_by_id("Team (optional)", teams, values.get("team_id"), "user_form_team",
                                  "No team"),
    }
    if is_update and not data["password"]:
        data.pop("password")  # never send an empty password
    data["team_id"] = data["team_id"] or None
    return data


def _team_fields(dash: Dashboard, values: dict, is_update: bool) -> dict:
    projects = run(dash.load_options(EntityKind.PROJECTS))
    users = run(dash.load_options(EntityKind.USERS))
    return {
        "name": st.text_input("Team Name *", value=values.get("name", "")),
        "project_id": _select_by_id("Project *", projects, values.get("project_id"), "team_form_project",
                                    "Select a project"),
        "owner_id": _select_by_id("Owner *", users, values.get("owner_id"), "team_form_owner",
                                  "Select an owner", fmt=lambda u: f"{u.name} ({u.email})"),
    }


def _project_fields(dash: Dashboard, values: dict, is_update: bool) -> dict:
    description = st.text_area("Description", value=values.get("description") or "", height=100)
    return {
        "name": st.text_input("Project Name *", value=values.get("name", "")),
        "description": description.strip() or None,
    }


def _task_fields(dash: Dashboard, values: dict, is_update: bool) -> dict:
    users = run(dash.load_options(EntityKind.USERS))
    statuses = list(TaskStatus)
    current_deadline = parse_date(values.get("deadline"))
    data = {
        "title": st.text_input("Title *", value=values.get("title", "")),
        "description": st.text_area("Description", value=values.get("description") or "", height=90),
        "status": st.selectbox("Status", statuses,
                               index=statuses.index(values.get("status") or TaskStatus.TODO),
                               format_func=lambda s: STATUS_LABELS[s]),
        "assigned_to": _select_by_id("Assigned To *", users, values.get("assigned_to"), "task_form_user",
                                     "Select a user", fmt=lambda u: f"{u.name} ({u.email})"),
        "deadline": st.date_input("Deadline", value=current_deadline, min_value=date(2000, 1, 1)),
    }
    data["description"] = data["description"].strip() or None
    data["deadline"] = data["deadline"].isoformat() if data["deadline"] else None
    return data


FIELD_RENDERERS = {
    EntityKind.USERS: _user_fields,
    EntityKind.TEAMS: _team_fields,
    EntityKind.PROJECTS: _project_fields,
    EntityKind.TASKS: _task_fields,
}


def render_entity_form(dash: Dashboard):
    """Create/update form for whichever entity kind the dashboard has open."""
    kind = dash.form_kind
    if kind is None:
        return
    is_update = dash.editing is not None
    title = f"{'Update' if is_update else 'Create'} {kind.singular.title()}"
    values = dash.form_defaults()

    with st.container(border=True):
        st.subheader(title)
        if dash.form_error:
            st.error(dash.form_error)
        with st.form(f"form_{kind.value}", clear_on_submit=False):
            data = FIELD_RENDERERS[kind](dash, values, is_update)
            c1, c2 = st.columns(2)
            submitted = c1.form_submit_button("Update" if is_update else "Create", use_container_width=True)
            cancelled = c2.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        dash.close_form()
        force_rerun()
    if submitted:
        model = UPDATE_MODELS[kind] if is_update else CREATE_MODELS[kind]
        try:
            payload = model.model_validate(data)
        except PydanticValidationError as e:
            dash.form_error = validation_message(e)
            force_rerun()
            return
        run(dash.submit_form(payload))
        force_rerun()
