"""
Tests for purchase recording:
- Stamp accrual below the threshold
- Threshold crossing: one coupon, balance back to zero, surplus discarded
- Coupon terms (15%, unused, 30 calendar days)
- Unknown client: purchase rejected and rolled back
- last_purchase_at / signals sent on commit / facade validation
- Client row locked for the stamp update
"""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError, connection
from django.db.models import QuerySet

from carimbo import LoyaltyService
from carimbo.exceptions import CarimboError
from carimbo.gates import GateError
from carimbo.models import Client, Coupon, Purchase
from carimbo.services import ledger
from carimbo.signals import coupon_issued, purchase_recorded
from carimbo.tests.helpers import NOW


pytestmark = pytest.mark.django_db


@pytest.fixture
def caught_signals():
    received = []

    def _handler(sender, **kwargs):
        received.append((sender, kwargs))

    purchase_recorded.connect(_handler)
    coupon_issued.connect(_handler)
    yield received
    purchase_recorded.disconnect(_handler)
    coupon_issued.disconnect(_handler)


# ═══════════════════════════════════════════════════════════════════
# Accrual below threshold
# ═══════════════════════════════════════════════════════════════════


class TestAccrual:
    def test_purchase_adds_stamps(self, frozen_clock, client_maria):
        result = ledger.record_purchase("12345678901", Decimal("450"))

        assert result.stamps_generated == 3
        assert result.current_stamps == 3
        assert result.coupon_generated is False
        assert result.coupon_id is None

        client_maria.refresh_from_db()
        assert client_maria.current_stamps == 3

    def test_purchase_below_unit_keeps_balance(self, frozen_clock, client_with_stamps):
        client = client_with_stamps(3)

        result = ledger.record_purchase(client.cpf, Decimal("149"))

        assert result.stamps_generated == 0
        client.refresh_from_db()
        assert client.current_stamps == 3
        assert Coupon.objects.count() == 0

    def test_purchase_is_persisted(self, frozen_clock, client_maria):
        result = ledger.record_purchase("123.456.789-01", Decimal("300.00"))

        purchase = Purchase.objects.get(pk=result.purchase_id)
        assert purchase.client_cpf == "12345678901"
        assert purchase.amount == Decimal("300.00")
        assert purchase.stamps_generated == 2
        assert purchase.created_at == NOW

    def test_amount_rounded_to_cents_before_stamping(self, frozen_clock, client_maria):
        result = ledger.record_purchase(client_maria.cpf, "149.995")

        assert result.amount == Decimal("150.00")
        assert result.stamps_generated == 1

    def test_last_purchase_at_refreshed(self, frozen_clock, client_maria):
        ledger.record_purchase(client_maria.cpf, Decimal("10"))

        client_maria.refresh_from_db()
        assert client_maria.last_purchase_at == NOW

    def test_balances_accumulate_across_purchases(self, frozen_clock, client_maria):
        for _ in range(4):
            ledger.record_purchase(client_maria.cpf, Decimal("300"))

        client_maria.refresh_from_db()
        assert client_maria.current_stamps == 8
        assert Purchase.objects.filter(client_cpf=client_maria.cpf).count() == 4


# ═══════════════════════════════════════════════════════════════════
# Threshold crossing
# ═══════════════════════════════════════════════════════════════════


class TestThresholdCrossing:
    def test_eight_plus_two_issues_coupon_and_resets(self, frozen_clock, client_with_stamps):
        client = client_with_stamps(8)

        result = ledger.record_purchase(client.cpf, Decimal("300"))

        assert result.stamps_generated == 2
        assert result.coupon_generated is True
        assert result.current_stamps == 0
        client.refresh_from_db()
        assert client.current_stamps == 0

        coupon = Coupon.objects.get()
        assert result.coupon_id == coupon.pk
        assert result.coupon_code == coupon.code
        assert coupon.client_cpf == client.cpf
        assert coupon.discount_rate == Decimal("0.15")
        assert coupon.used is False
        assert coupon.issued_at == NOW
        assert coupon.valid_until == coupon.issued_at + timedelta(days=30)

    def test_surplus_is_discarded(self, frozen_clock, client_with_stamps):
        client = client_with_stamps(9)

        result = ledger.record_purchase(client.cpf, Decimal("3000"))

        assert result.stamps_generated == 20
        assert result.current_stamps == 0
        assert Coupon.objects.filter(client_cpf=client.cpf).count() == 1

    def test_every_crossing_issues_one_coupon(self, frozen_clock, client_maria):
        for _ in range(4):
            ledger.record_purchase(client_maria.cpf, Decimal("750"))
            frozen_clock.advance(days=1)

        client_maria.refresh_from_db()
        assert client_maria.current_stamps == 0
        assert Coupon.objects.filter(client_cpf=client_maria.cpf).count() == 2

    def test_coupons_stack(self, frozen_clock, client_maria):
        ledger.record_purchase(client_maria.cpf, Decimal("1500"))
        ledger.record_purchase(client_maria.cpf, Decimal("1500"))

        coupons = Coupon.objects.filter(client_cpf=client_maria.cpf)
        assert coupons.count() == 2
        assert all(c.is_active(NOW) for c in coupons)

    def test_last_purchase_at_refreshed_on_crossing(self, frozen_clock, client_with_stamps):
        client = client_with_stamps(9)

        ledger.record_purchase(client.cpf, Decimal("150"))

        client.refresh_from_db()
        assert client.last_purchase_at == NOW

    def test_threshold_is_configurable(self, frozen_clock, settings, client_maria):
        settings.CARIMBO = {**settings.CARIMBO, "STAMPS_THRESHOLD": 3}

        result = ledger.record_purchase(client_maria.cpf, Decimal("450"))

        assert result.coupon_generated is True
        assert result.current_stamps == 0


# ═══════════════════════════════════════════════════════════════════
# Unknown client
# ═══════════════════════════════════════════════════════════════════


class TestUnknownClient:
    def test_raises_client_not_found(self, frozen_clock, db):
        with pytest.raises(CarimboError) as exc_info:
            ledger.record_purchase("00000000000", Decimal("300"))

        assert exc_info.value.code == "CLIENT_NOT_FOUND"
        assert exc_info.value.data == {"cpf": "00000000000"}

    def test_purchase_is_rolled_back(self, frozen_clock, db):
        with pytest.raises(CarimboError):
            ledger.record_purchase("00000000000", Decimal("3000"))

        assert Purchase.objects.count() == 0
        assert Coupon.objects.count() == 0


# ═══════════════════════════════════════════════════════════════════
# Signals
# ═══════════════════════════════════════════════════════════════════


class TestLedgerSignals:
    def test_purchase_recorded_sent(
        self, frozen_clock, client_maria, caught_signals, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            result = ledger.record_purchase(client_maria.cpf, Decimal("300"))

        senders = [sender for sender, _ in caught_signals]
        assert senders == [Purchase]
        assert caught_signals[0][1]["result"] == result

    def test_coupon_issued_sent_on_crossing(
        self, frozen_clock, client_with_stamps, caught_signals, django_capture_on_commit_callbacks
    ):
        client = client_with_stamps(9)

        with django_capture_on_commit_callbacks(execute=True):
            ledger.record_purchase(client.cpf, Decimal("150"))

        senders = [sender for sender, _ in caught_signals]
        assert senders == [Coupon, Purchase]

    def test_signals_wait_for_commit(
        self, frozen_clock, client_with_stamps, caught_signals, django_capture_on_commit_callbacks
    ):
        client = client_with_stamps(9)

        with django_capture_on_commit_callbacks() as callbacks:
            ledger.record_purchase(client.cpf, Decimal("150"))

        assert caught_signals == []
        assert len(callbacks) == 2

    def test_no_coupon_issued_when_card_update_fails(
        self, frozen_clock, client_with_stamps, caught_signals, django_capture_on_commit_callbacks
    ):
        client = client_with_stamps(9)

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with patch.object(Client, "save", side_effect=DatabaseError("disk full")):
                with pytest.raises(DatabaseError):
                    ledger.record_purchase(client.cpf, Decimal("150"))

        assert callbacks == []
        assert caught_signals == []
        assert Coupon.objects.count() == 0
        assert Purchase.objects.count() == 0


# ═══════════════════════════════════════════════════════════════════
# Row lock
# ═══════════════════════════════════════════════════════════════════


class TestClientRowLock:
    def test_client_row_locked_inside_purchase_transaction(
        self, frozen_clock, client_with_stamps
    ):
        client = client_with_stamps(9)
        outer_depth = len(connection.savepoint_ids)
        original = QuerySet.select_for_update
        locks = []

        def _spy(qs, *args, **kwargs):
            locks.append((qs.model, len(connection.savepoint_ids)))
            return original(qs, *args, **kwargs)

        with patch.object(QuerySet, "select_for_update", autospec=True, side_effect=_spy):
            result = ledger.record_purchase(client.cpf, Decimal("150"))

        assert locks == [(Client, outer_depth + 1)]
        assert result.coupon_generated is True

    def test_locked_row_is_the_one_updated(self, frozen_clock, client_with_stamps):
        client = client_with_stamps(9)
        original = QuerySet.select_for_update
        locked = []

        def _spy(qs, *args, **kwargs):
            locked_qs = original(qs, *args, **kwargs)
            locked.append(locked_qs)
            return locked_qs

        with patch.object(QuerySet, "select_for_update", autospec=True, side_effect=_spy):
            ledger.record_purchase(client.cpf, Decimal("150"))

        assert len(locked) == 1
        assert locked[0].query.select_for_update is True
        assert Client.objects.get(pk=client.pk).current_stamps == 0
        assert Coupon.objects.filter(client_cpf=client.cpf).count() == 1


# ═══════════════════════════════════════════════════════════════════
# Facade
# ═══════════════════════════════════════════════════════════════════


class TestRecordPurchaseFacade:
    def test_validates_cpf_before_writing(self, frozen_clock, client_maria):
        with pytest.raises(GateError, match="G1_CpfFormat"):
            LoyaltyService.record_purchase("1234", Decimal("300"))
        assert Purchase.objects.count() == 0

    @pytest.mark.parametrize("amount", [0, Decimal("-10"), "abc", "1e30", "123456789012.50"])
    def test_validates_amount_before_writing(self, frozen_clock, client_maria, amount):
        with pytest.raises(GateError, match="G2_PositiveAmount"):
            LoyaltyService.record_purchase(client_maria.cpf, amount)
        assert Purchase.objects.count() == 0

    def test_largest_amount_is_stored_and_readable(self, frozen_clock, client_maria):
        LoyaltyService.record_purchase(client_maria.cpf, "9999999999.99")

        history = LoyaltyService.purchase_history(client_maria.cpf)
        assert [p.amount for p in history] == [Decimal("9999999999.99")]
        assert len(LoyaltyService.dashboard().purchases) == 1

    def test_records_and_returns_result(self, frozen_clock, client_with_stamps):
        client = client_with_stamps(8)

        result = LoyaltyService.record_purchase("123.456.789-01", "300")

        assert result.coupon_generated is True
        assert Client.objects.get(pk=client.pk).current_stamps == 0
