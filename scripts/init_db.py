from sqlalchemy import text

from campusapi.config import settings
from campusapi.database.connection import engine
from campusapi.models import Base


def init_db():
    """데이터베이스 초기화"""
    try:
        if not settings.database_url.startswith("sqlite"):
            # 스키마 생성
            with engine.connect() as conn:
                conn.execute(
                    text(f"CREATE SCHEMA IF NOT EXISTS {settings.POSTGRES_SCHEMA}")
                )
                conn.commit()

        # 테이블 생성
        Base.metadata.create_all(bind=engine)
        print(
            f"Database initialized successfully with schema: {settings.POSTGRES_SCHEMA}"
        )

    except Exception as e:
        print(f"Database initialization failed: {str(e)}")
        raise


if __name__ == "__main__":
    init_db()
