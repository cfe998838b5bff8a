"""
Subject model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional


class Subject(SQLModel, table=True):
    """Subject table - groups topics; topics follow its archived flag."""
    __tablename__ = "subject"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    user_id: int = Field(foreign_key="user.id", index=True)
    archived: bool = Field(default=False)
