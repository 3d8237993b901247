import contextlib
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from database.repositories import SdsRecordRepository, SdsUploadRepository

logger = logging.getLogger(__name__)


@dataclass
class SdsRepositories:
    """Repositories bound to one session."""
    session: Session
    records: SdsRecordRepository
    uploads: SdsUploadRepository


@contextlib.contextmanager
def sds_uow(session_factory: sessionmaker):
    """Per-unit-of-work transaction scope.

    Yields repositories bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with sds_uow(session_factory) as repos:
            row = repos.records.find_exact("Acetone")
        # commit happens automatically on successful exit
    """
    session = session_factory()
    try:
        yield SdsRepositories(
            session=session,
            records=SdsRecordRepository(session),
            uploads=SdsUploadRepository(session),
        )
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
