from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from typing import List
import uuid

from .task import utcnow


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(nullable=False, max_length=100)
    # Stored exactly as submitted; no case folding
    email: str = Field(unique=True, index=True, nullable=False)
    password_hash: str = Field(nullable=False)
    role: str = Field(default="user", nullable=False)
    created_at: NaiveDatetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime())
    updated_at: NaiveDatetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime())

    # Owned tasks go with the user
    tasks: List["Task"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "passive_deletes": True},
    )
