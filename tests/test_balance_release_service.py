from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from campusapi.models import Notification, TransactionStatusEnum
from campusapi.services.balance_release_service import (
    BalanceReleaseService,
    calculate_seller_earnings,
)


def _db_error():
    return OperationalError("UPDATE user_stats", {}, Exception("database is locked"))


@pytest.fixture
def service(db_session, test_settings):
    return BalanceReleaseService(db_session, settings=test_settings)


@pytest.fixture
def seller_with_item(make_user, make_item):
    def _make(name: str = "Seller"):
        seller = make_user(name)
        return seller, make_item(seller)

    return _make


class TestCalculateSellerEarnings:
    """플랫폼 수수료 계산 테스트"""

    def test_exact_fee(self):
        assert calculate_seller_earnings(10000, 0.05) == (500, 9500)

    def test_fee_is_floored(self):
        # 333 * 0.05 = 16.65
        assert calculate_seller_earnings(333, 0.05) == (16, 317)

    def test_zero_amount(self):
        assert calculate_seller_earnings(0, 0.05) == (0, 0)


class TestSettlementSweep:
    """판매 대금 정산 스윕 테스트"""

    def test_full_settlement_run(
        self, service, db_session, now, seller_with_item, make_transaction, make_stats, reload_stats
    ):
        """4일 지난 거래 두 건은 정산되고 1일 지난 거래는 그대로"""
        # Given
        seller_a, item_a = seller_with_item("Andi")
        seller_b, item_b = seller_with_item("Bunga")
        make_stats(seller_a, pending=19000 + 28500)
        make_stats(seller_b, pending=47500)
        make_transaction(item_a, 20000, now - timedelta(days=4))
        make_transaction(item_b, 50000, now - timedelta(days=4))
        make_transaction(item_a, 30000, now - timedelta(days=1))

        # When
        result = service.run_settlement_sweep(now=now)

        # Then
        assert result.success is True
        assert result.released_count == 2
        assert result.total_released == 66500
        assert result.processed_transactions == 2
        assert result.failed_count == 0

        stats_a = reload_stats(seller_a.id)
        assert stats_a.pending_balance == 28500
        assert stats_a.available_balance == 19000
        stats_b = reload_stats(seller_b.id)
        assert stats_b.pending_balance == 0
        assert stats_b.available_balance == 47500

        notifications = (
            db_session.query(Notification)
            .filter(Notification.user_id == seller_a.id)
            .all()
        )
        assert len(notifications) == 1
        assert notifications[0].title == "Balance Available"
        assert notifications[0].message == (
            "Rp 19,000 from your sale is now available for withdrawal!"
        )

    def test_response_uses_camel_case_keys(
        self, service, now, seller_with_item, make_transaction, make_stats
    ):
        seller, item = seller_with_item()
        make_stats(seller, pending=9500)
        make_transaction(item, 10000, now - timedelta(days=5))

        result = service.run_settlement_sweep(now=now)

        assert result.to_response() == {
            "success": True,
            "releasedCount": 1,
            "totalReleased": 9500,
            "processedTransactions": 1,
            "failedCount": 0,
        }

    def test_cutoff_boundary(
        self, service, now, seller_with_item, make_transaction, make_stats, reload_stats
    ):
        """정확히 now - 3일인 거래는 대상, 1ms 뒤는 대상 아님"""
        seller, item = seller_with_item()
        make_stats(seller, pending=9500 * 2)
        cutoff = now - timedelta(days=3)
        make_transaction(item, 10000, cutoff)
        make_transaction(item, 10000, cutoff + timedelta(milliseconds=1))

        result = service.run_settlement_sweep(now=now)

        assert result.processed_transactions == 1
        assert result.released_count == 1
        assert reload_stats(seller.id).pending_balance == 9500

    def test_only_completed_transactions_are_selected(
        self, service, now, seller_with_item, make_transaction, make_stats
    ):
        seller, item = seller_with_item()
        make_stats(seller, pending=100000)
        for status in (
            TransactionStatusEnum.PENDING,
            TransactionStatusEnum.FAILED,
            TransactionStatusEnum.REFUNDED,
        ):
            make_transaction(item, 10000, now - timedelta(days=10), status=status)

        result = service.run_settlement_sweep(now=now)

        assert result.processed_transactions == 0
        assert result.released_count == 0

    def test_insufficient_pending_balance_is_skipped(
        self, service, db_session, now, seller_with_item, make_transaction, make_stats, reload_stats
    ):
        """보류 잔액이 수익보다 적으면 일부만 정산하지 않고 건너뜀"""
        seller, item = seller_with_item()
        make_stats(seller, pending=5000)
        make_transaction(item, 20000, now - timedelta(days=4))

        result = service.run_settlement_sweep(now=now)

        assert result.success is True
        assert result.processed_transactions == 1
        assert result.released_count == 0
        assert result.total_released == 0
        stats = reload_stats(seller.id)
        assert stats.pending_balance == 5000
        assert stats.available_balance == 0
        assert db_session.query(Notification).count() == 0

    def test_seller_without_ledger_is_skipped(
        self, service, db_session, now, seller_with_item, make_transaction
    ):
        seller, item = seller_with_item()
        make_transaction(item, 20000, now - timedelta(days=4))

        result = service.run_settlement_sweep(now=now)

        assert result.success is True
        assert result.released_count == 0
        assert service.user_stats_repo.get_by_user_id(seller.id) is None
        assert db_session.query(Notification).count() == 0

    def test_transaction_without_item_is_skipped(
        self, service, now, make_user, make_transaction, make_stats, reload_stats
    ):
        seller = make_user("Seller")
        make_stats(seller, pending=19000)
        make_transaction(None, 20000, now - timedelta(days=4))

        result = service.run_settlement_sweep(now=now)

        assert result.processed_transactions == 1
        assert result.released_count == 0
        assert reload_stats(seller.id).pending_balance == 19000

    def test_repeat_sweep_does_not_release_twice(
        self, service, now, seller_with_item, make_transaction, make_stats, reload_stats
    ):
        """보류 잔액이 소진되면 같은 거래가 다시 정산되지 않음"""
        seller, item = seller_with_item()
        make_stats(seller, pending=19000)
        make_transaction(item, 20000, now - timedelta(days=4))

        first = service.run_settlement_sweep(now=now)
        second = service.run_settlement_sweep(now=now + timedelta(hours=1))

        assert first.released_count == 1
        assert second.processed_transactions == 1
        assert second.released_count == 0
        stats = reload_stats(seller.id)
        assert stats.pending_balance == 0
        assert stats.available_balance == 19000

    def test_same_seller_twice_in_one_sweep(
        self, service, now, seller_with_item, make_transaction, make_stats, reload_stats
    ):
        seller, item = seller_with_item()
        make_stats(seller, pending=19000 + 9500)
        make_transaction(item, 20000, now - timedelta(days=5))
        make_transaction(item, 10000, now - timedelta(days=4))

        result = service.run_settlement_sweep(now=now)

        assert result.released_count == 2
        assert result.total_released == 28500
        stats = reload_stats(seller.id)
        assert stats.pending_balance == 0
        assert stats.available_balance == 28500

    def test_row_failure_is_isolated(
        self, service, now, seller_with_item, make_transaction, make_stats, reload_stats
    ):
        """한 거래의 DB 오류는 해당 거래만 실패로 집계하고 나머지는 계속 정산"""
        seller_a, item_a = seller_with_item("Andi")
        seller_b, item_b = seller_with_item("Bunga")
        make_stats(seller_a, pending=19000)
        make_stats(seller_b, pending=47500)
        make_transaction(item_a, 20000, now - timedelta(days=5))
        make_transaction(item_b, 50000, now - timedelta(days=4))
        failing_seller_id = seller_a.id

        original = service.user_stats_repo.try_decrement_if_at_least

        def flaky(user_id, amount):
            if user_id == failing_seller_id:
                raise _db_error()
            return original(user_id, amount)

        with patch.object(
            service.user_stats_repo, "try_decrement_if_at_least", side_effect=flaky
        ):
            result = service.run_settlement_sweep(now=now)

        assert result.success is True
        assert result.processed_transactions == 2
        assert result.failed_count == 1
        assert result.released_count == 1
        assert result.total_released == 47500
        assert reload_stats(failing_seller_id).pending_balance == 19000
        assert reload_stats(seller_b.id).available_balance == 47500

    def test_scan_failure_returns_error_result(self, service, now):
        with patch.object(
            service.transaction_repo, "find_completed_before", side_effect=_db_error()
        ):
            result = service.run_settlement_sweep(now=now)

        assert result.success is False
        assert "database is locked" in result.error
        assert result.to_response() == {"success": False, "error": result.error}

    def test_batches_are_paged_until_exhausted(
        self, db_session, test_settings, now, seller_with_item, make_transaction, make_stats
    ):
        settings = test_settings.model_copy(update={"SWEEP_BATCH_SIZE": 2})
        service = BalanceReleaseService(db_session, settings=settings)
        seller, item = seller_with_item()
        make_stats(seller, pending=9500 * 5)
        for days in range(4, 9):
            make_transaction(item, 10000, now - timedelta(days=days))

        result = service.run_settlement_sweep(now=now)

        assert result.processed_transactions == 5
        assert result.released_count == 5

    def test_row_cap_limits_a_single_sweep(
        self, db_session, test_settings, now, seller_with_item, make_transaction, make_stats
    ):
        settings = test_settings.model_copy(
            update={"SWEEP_BATCH_SIZE": 2, "SWEEP_MAX_ROWS": 3}
        )
        service = BalanceReleaseService(db_session, settings=settings)
        seller, item = seller_with_item()
        make_stats(seller, pending=9500 * 5)
        for days in range(4, 9):
            make_transaction(item, 10000, now - timedelta(days=days))

        result = service.run_settlement_sweep(now=now)

        assert result.processed_transactions == 3
        assert result.released_count == 3

    def test_zero_earnings_transaction_is_released(
        self, service, db_session, now, seller_with_item, make_transaction, make_stats, reload_stats
    ):
        """0원 거래도 다른 거래와 똑같이 정산 처리되고 알림이 생성됨"""
        seller, item = seller_with_item()
        make_stats(seller, pending=0)
        make_transaction(item, 0, now - timedelta(days=4))

        result = service.run_settlement_sweep(now=now)

        assert result.released_count == 1
        assert result.total_released == 0
        assert reload_stats(seller.id).pending_balance == 0
        notification = db_session.query(Notification).one()
        assert notification.message == "Rp 0 from your sale is now available for withdrawal!"

    def test_row_cap_warning_when_rows_remain(
        self, db_session, test_settings, now, seller_with_item, make_transaction, make_stats
    ):
        """상한이 마지막 짧은 페이지 안에서 걸려도 경고를 남김"""
        settings = test_settings.model_copy(
            update={"SWEEP_BATCH_SIZE": 3, "SWEEP_MAX_ROWS": 4}
        )
        service = BalanceReleaseService(db_session, settings=settings)
        seller, item = seller_with_item()
        make_stats(seller, pending=9500 * 5)
        for days in range(4, 9):
            make_transaction(item, 10000, now - timedelta(days=days))

        with patch("campusapi.services.balance_release_service.logger") as logger:
            result = service.run_settlement_sweep(now=now)

        assert result.processed_transactions == 4
        logger.warning.assert_called_once()
        assert "row cap (4)" in logger.warning.call_args.args[0]

    def test_no_row_cap_warning_when_rows_exactly_fill_cap(
        self, db_session, test_settings, now, seller_with_item, make_transaction, make_stats
    ):
        settings = test_settings.model_copy(
            update={"SWEEP_BATCH_SIZE": 2, "SWEEP_MAX_ROWS": 4}
        )
        service = BalanceReleaseService(db_session, settings=settings)
        seller, item = seller_with_item()
        make_stats(seller, pending=9500 * 4)
        for days in range(4, 8):
            make_transaction(item, 10000, now - timedelta(days=days))

        with patch("campusapi.services.balance_release_service.logger") as logger:
            result = service.run_settlement_sweep(now=now)

        assert result.processed_transactions == 4
        assert result.released_count == 4
        logger.warning.assert_not_called()
