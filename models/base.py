# models/base.py
from pydantic import ConfigDict
from sqlmodel import SQLModel


class ApiModel(SQLModel):
    """Non-table SQLModel shared by every API payload.

    The API speaks camelCase; fields declare their wire name as an alias and
    still accept the Python name on construction.
    """

    model_config = ConfigDict(populate_by_name=True)
