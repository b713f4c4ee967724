"""
Database Models

Key-value storage for application-wide documents such as the
library metadata index.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all OpenShelf models."""


class GlobalValue(Base):
    """
    A single global key-value pair.
    """

    __tablename__ = "global_values"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<GlobalValue {self.key}: {len(self.value)} chars>"
