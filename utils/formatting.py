# utils/formatting.py
from datetime import date, datetime
from typing import Optional

from dateutil import parser

from models import TaskStatus, UserRole

STATUS_LABELS = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}

# Consistent status colors (Jira-like palette)
STATUS_COLORS = {
    "To Do": "#9CA3AF",        # gray-400
    "In Progress": "#2563EB",  # blue-600
    "Done": "#16A34A",         # green-600
}

ROLE_LABELS = {
    UserRole.ADMIN: "Admin",
    UserRole.MANAGER: "Manager",
    UserRole.MEMBER: "Member",
}

PLACEHOLDER = "-"


def parse_date(x) -> Optional[date]:
    if not x:
        return None
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    try:
        return parser.parse(str(x)).date()
    except (ValueError, OverflowError):
        return None


def format_date(x) -> str:
    d = parse_date(x)
    return d.strftime("%b %d, %Y") if d else PLACEHOLDER


def status_label(status) -> str:
    if not status:
        return STATUS_LABELS[TaskStatus.TODO]
    try:
        return STATUS_LABELS[TaskStatus(status)]
    except ValueError:
        return str(status).replace("_", " ").title()


def role_label(role) -> str:
    try:
        return ROLE_LABELS[UserRole(role)]
    except ValueError:
        return str(role).title()


def short_id(value: Optional[str], length: int = 8) -> str:
    if not value:
        return PLACEHOLDER
    return value if len(value) <= length else f"{value[:length]}..."


def or_placeholder(value: Optional[str]) -> str:
    return value.strip() if value and value.strip() else PLACEHOLDER
