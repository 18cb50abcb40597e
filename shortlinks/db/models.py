"""
Database Models for the Link Service

This module defines the SQLModel schema for the single persisted entity:
- Link: pairs an original URL with its generated short code

Design Decisions:
- id is an auto-incrementing primary key assigned by the database
- short_url carries a unique index so two links can never share a code;
  the service regenerates a code when the index rejects a row
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlmodel import SQLModel, Field, Column

SHORT_URL_MAX_LENGTH = 16

# Range of the 32-bit INTEGER id column
LINK_ID_MIN = -(2 ** 31)
LINK_ID_MAX = 2 ** 31 - 1


class Link(SQLModel, table=True):
    """
    Table storing shortened links.

    Fields:
    - id: Auto-incrementing primary key, immutable once assigned
    - url: The original target URL
    - short_url: Generated alphanumeric alias (5 characters by default)
    """
    __tablename__ = "link"

    id: Optional[int] = Field(default=None, primary_key=True)
    url: str = Field(sa_column=Column(Text, nullable=False))
    short_url: str = Field(
        sa_column=Column(String(SHORT_URL_MAX_LENGTH), nullable=False, unique=True, index=True),
        max_length=SHORT_URL_MAX_LENGTH
    )
