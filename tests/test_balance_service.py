from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from campusapi.core.exceptions import ServiceException
from campusapi.models import TransactionStatusEnum
from campusapi.services.balance_service import BalanceService


@pytest.fixture
def service(db_session, test_settings):
    return BalanceService(db_session, settings=test_settings)


class TestGetUserBalance:
    def test_creates_empty_ledger(self, service, make_user):
        user = make_user("Sari")

        balance = service.get_user_balance(user.id)

        assert balance.model_dump(by_alias=True) == {
            "pendingBalance": 0,
            "availableBalance": 0,
            "withdrawnBalance": 0,
            "totalEarnings": 0,
        }
        assert service.user_stats_repo.get_by_user_id(user.id) is not None

    def test_existing_ledger(self, service, make_user, make_stats):
        user = make_user("Sari")
        make_stats(user, pending=9500, available=19000)

        balance = service.get_user_balance(user.id)

        assert balance.pending_balance == 9500
        assert balance.available_balance == 19000


class TestBackfillBalances:
    """거래 내역 기반 잔액 재계산 테스트"""

    def test_splits_pending_and_available_by_hold_period(
        self, service, now, make_user, make_item, make_transaction, make_stats, reload_stats
    ):
        # Given
        seller = make_user("Sari")
        item = make_item(seller)
        make_stats(seller, pending=1, available=1)
        make_transaction(item, 20000, now - timedelta(days=5))
        make_transaction(item, 10000, now - timedelta(days=1))
        make_transaction(item, 50000, now - timedelta(days=1), status=TransactionStatusEnum.PENDING)

        # When
        response = service.backfill_balances(now=now)

        # Then
        assert response.success is True
        assert response.summary.total_transactions == 2
        assert response.summary.sellers_updated == 1
        assert response.results[0].total_earnings == 28500

        stats = reload_stats(seller.id)
        assert stats.available_balance == 19000
        assert stats.pending_balance == 9500
        assert stats.total_earnings == 28500
        assert stats.withdrawn_balance == 0

    def test_creates_ledger_for_new_seller(
        self, service, now, make_user, make_item, make_transaction, reload_stats
    ):
        seller = make_user("Bunga")
        item = make_item(seller)
        make_transaction(item, 50000, now - timedelta(days=4))

        response = service.backfill_balances(now=now)

        stats = reload_stats(seller.id)
        assert stats.available_balance == 47500
        assert stats.items_sold == 1
        assert response.model_dump(by_alias=True)["summary"] == {
            "totalTransactions": 1,
            "sellersUpdated": 1,
        }

    def test_database_error_raises_service_exception(self, service, now):
        error = OperationalError("SELECT transactions", {}, Exception("timeout"))
        with patch.object(
            service.transaction_repo, "find_completed_by_item_type", side_effect=error
        ):
            with pytest.raises(ServiceException):
                service.backfill_balances(now=now)
