import os

# 앱 모듈 import 전에 테스트 환경 설정
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import uuid
from datetime import datetime, timezone
from typing import Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campusapi.config import Settings
from campusapi.models import (
    Base,
    Conversation,
    MarketplaceItem,
    Message,
    Transaction,
    TransactionStatusEnum,
    User,
    UserRole,
    UserStats,
)

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
CRON_SECRET = os.environ["CRON_SECRET"]


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """테스트용 인메모리 SQLite 세션"""
    session = sessionmaker(bind=db_engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        ENVIRONMENT="test",
        APP_BASE_URL="https://campuscircle.test",
        CRON_SECRET=CRON_SECRET,
    )


@pytest.fixture
def make_user(db_session):
    def _make(name: str = "Budi", role: str = UserRole.USER.value) -> User:
        user = User(
            name=name,
            email=f"{name.lower()}.{uuid.uuid4().hex[:8]}@campus.ac.id",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def make_item(db_session):
    def _make(seller: User, price: int = 10000) -> MarketplaceItem:
        item = MarketplaceItem(seller_id=seller.id, title="Kalkulus Textbook", price=price)
        db_session.add(item)
        db_session.commit()
        return item

    return _make


@pytest.fixture
def make_transaction(db_session, make_user):
    buyer_holder = {}

    def _make(
        item: Optional[MarketplaceItem],
        amount: int,
        created_at: datetime,
        status: TransactionStatusEnum = TransactionStatusEnum.COMPLETED,
    ) -> Transaction:
        if "buyer" not in buyer_holder:
            buyer_holder["buyer"] = make_user("Buyer")
        transaction = Transaction(
            item_id=item.id if item is not None else None,
            buyer_id=buyer_holder["buyer"].id,
            amount=amount,
            status=status,
            created_at=created_at,
        )
        db_session.add(transaction)
        db_session.commit()
        return transaction

    return _make


@pytest.fixture
def make_stats(db_session):
    def _make(user: User, pending: int = 0, available: int = 0) -> UserStats:
        stats = UserStats(
            user_id=user.id,
            pending_balance=pending,
            available_balance=available,
            total_earnings=pending + available,
        )
        db_session.add(stats)
        db_session.commit()
        return stats

    return _make


@pytest.fixture
def make_conversation(db_session):
    def _make(participant1: User, participant2: User) -> Conversation:
        conversation = Conversation(
            participant1_id=participant1.id, participant2_id=participant2.id
        )
        db_session.add(conversation)
        db_session.commit()
        return conversation

    return _make


@pytest.fixture
def make_message(db_session):
    def _make(
        conversation: Conversation,
        sender: User,
        receiver: User,
        created_at: datetime,
        content: str = "Halo, barangnya masih ada?",
        is_read: bool = False,
        email_notification_sent: bool = False,
    ) -> Message:
        message = Message(
            conversation_id=conversation.id,
            sender_id=sender.id,
            receiver_id=receiver.id,
            content=content,
            is_read=is_read,
            email_notification_sent=email_notification_sent,
            created_at=created_at,
        )
        db_session.add(message)
        db_session.commit()
        return message

    return _make


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def cron_headers():
    return {"Authorization": f"Bearer {CRON_SECRET}"}


@pytest.fixture
def reload_stats(db_session):
    """서비스가 실행한 UPDATE 결과를 보기 위해 세션 캐시를 비우고 원장 재조회"""

    def _reload(user_id: str) -> UserStats:
        db_session.expire_all()
        return db_session.query(UserStats).filter(UserStats.user_id == user_id).one()

    return _reload
