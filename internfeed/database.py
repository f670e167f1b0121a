"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for internship storage.
"""

from datetime import date
from pathlib import Path
from typing import Any, Dict

from sqlalchemy import Column, Date, Integer, String, UniqueConstraint, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Internship(Base):
    """Stored internship posting."""

    __tablename__ = "internships"
    # dedup key: the same posting on the same day is stored once
    __table_args__ = (
        UniqueConstraint("company", "role", "date_posted", name="uq_internship_posting"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    company = Column(String, nullable=False)
    role = Column(String, nullable=False)
    location = Column(String(500))
    application_link = Column(String(1000))
    date_posted = Column(Date, nullable=False, index=True)
    created_at = Column(Date, nullable=False, default=date.today)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "company": self.company,
            "role": self.role,
            "location": self.location,
            "applicationLink": self.application_link,
            "datePosted": self.date_posted.isoformat() if self.date_posted else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


def create_db_engine(db_path: Path) -> Engine:
    return create_engine(f"sqlite:///{db_path}")


def init_database(db_path: Path) -> Engine:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file

    Returns:
        Engine bound to the database
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    Base.metadata.create_all(engine)
    return engine
