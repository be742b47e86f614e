# utils/tables.py
"""Turn API records into the DataFrames shown by the collection panels."""

from typing import Iterable, Optional

import pandas as pd

from models import Project, Task, Team, User
from utils.formatting import format_date, or_placeholder, role_label, short_id, status_label

TEAM_COLUMNS = ["Team", "Project", "Owner", "Created"]
PROJECT_COLUMNS = ["Project", "Description", "Created"]
TASK_COLUMNS = ["Task", "Status", "Assignee", "Deadline", "Created"]
USER_COLUMNS = ["Name", "Email", "Role", "Team", "Joined"]


def _frame(rows, columns) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=columns) if rows else pd.DataFrame(columns=columns)


def teams_df(teams: Iterable[Team]) -> pd.DataFrame:
    rows = [{
        "Team": t.name,
        "Project": short_id(t.project_id),
        "Owner": short_id(t.owner_id),
        "Created": format_date(t.created_at),
    } for t in teams]
    return _frame(rows, TEAM_COLUMNS)


def projects_df(projects: Iterable[Project]) -> pd.DataFrame:
    rows = [{
        "Project": p.name,
        "Description": or_placeholder(p.description),
        "Created": format_date(p.created_at),
    } for p in projects]
    return _frame(rows, PROJECT_COLUMNS)


def tasks_df(tasks: Iterable[Task], assignee_names: Optional[dict] = None) -> pd.DataFrame:
    assignee_names = assignee_names or {}
    rows = [{
        "Task": t.title,
        "Status": status_label(t.status),
        "Assignee": assignee_names.get(t.assigned_to) or short_id(t.assigned_to),
        "Deadline": format_date(t.deadline),
        "Created": format_date(t.created_at),
    } for t in tasks]
    return _frame(rows, TASK_COLUMNS)


def users_df(users: Iterable[User]) -> pd.DataFrame:
    rows = [{
        "Name": u.name,
        "Email": u.email,
        "Role": role_label(u.role),
        "Team": short_id(u.team_id),
        "Joined": format_date(u.created_at),
    } for u in users]
    return _frame(rows, USER_COLUMNS)


def status_breakdown(tasks: Iterable[Task]) -> pd.DataFrame:
    """Task count per status for the tasks currently on screen."""
    df = tasks_df(tasks)
    if df.empty:
        return pd.DataFrame(columns=["Status", "Tasks"])
    counts = df.groupby("Status").size().reset_index(name="Tasks")
    return counts.sort_values("Status").reset_index(drop=True)
