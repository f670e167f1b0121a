"""
Internship store backed by SQLite.

Each method runs in its own session and commits before returning, so an
insert is visible to the next existence check. No business rules live
here: deciding what to insert or delete is the reconciler's and the
sweeper's job.
"""

from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from .database import Internship, init_database
from .models import InternshipPosting


class InternshipStore:

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.engine = init_database(db_path)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def insert(self, posting: InternshipPosting) -> Optional[int]:
        """Persist a posting and return its id.

        Returns None when the unique key already exists, which only happens
        if another writer inserted the same posting after our existence check.
        """
        row = Internship(
            company=posting.company,
            role=posting.role,
            location=posting.location,
            application_link=posting.application_link,
            date_posted=posting.date_posted,
            created_at=date.today(),
        )
        try:
            with self.session() as session:
                session.add(row)
                session.flush()
                return row.id
        except IntegrityError:
            return None

    def exists_by_key(self, company: str, role: str, date_posted: date) -> bool:
        with self.session() as session:
            query = session.query(Internship.id).filter_by(
                company=company, role=role, date_posted=date_posted
            )
            return session.query(query.exists()).scalar()

    def get(self, internship_id: int) -> Optional[Internship]:
        with self.session() as session:
            return session.get(Internship, internship_id)

    def count(self) -> int:
        with self.session() as session:
            return session.query(Internship).count()

    def all(self) -> List[Internship]:
        with self.session() as session:
            return session.query(Internship).order_by(Internship.date_posted.desc()).all()

    def find_by_date_posted_after(self, since: date) -> List[Internship]:
        with self.session() as session:
            return (
                session.query(Internship)
                .filter(Internship.date_posted > since)
                .order_by(Internship.date_posted.desc())
                .all()
            )

    def search_company(self, text: str, since: Optional[date] = None) -> List[Internship]:
        """Case-insensitive substring match on company, optionally newer than `since`."""
        with self.session() as session:
            query = session.query(Internship).filter(
                func.lower(Internship.company).contains(text.lower(), autoescape=True)
            )
            if since is not None:
                query = query.filter(Internship.date_posted > since)
            return query.order_by(Internship.date_posted.desc()).all()

    def delete_by_date_posted_before(self, cutoff: date) -> int:
        with self.session() as session:
            return (
                session.query(Internship)
                .filter(Internship.date_posted < cutoff)
                .delete(synchronize_session=False)
            )
