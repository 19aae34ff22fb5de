from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from campusapi.database.connection import SessionLocal


def get_db() -> Iterator[Session]:
    """요청 단위 세션. 커밋은 서비스가 작업 단위마다 직접 수행합니다."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        if db.in_transaction():
            db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_context(commit: bool = True) -> Iterator[Session]:
    """스크립트용 세션. 읽기 전용 작업은 commit=False 로 사용합니다."""
    db = SessionLocal()
    try:
        yield db
        if commit:
            db.commit()
        else:
            db.rollback()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
