"""Tests for the per-pool capital ledger."""

import pytest

from allocator.entities.liquidity_ledger import LiquidityLedger
from allocator.entities.pool_registry import PoolRegistry
from allocator.exceptions import InsufficientLiquidity, InvalidAmount, InvalidPool, UnverifiedPool


@pytest.fixture
def ledger() -> LiquidityLedger:
    return LiquidityLedger(PoolRegistry(("susd", "y")))


class TestCredit:
    def test_starts_empty(self, ledger):
        assert ledger.balances() == (0, 0)
        assert ledger.total == 0

    def test_credit_pool_a(self, ledger):
        ledger.credit("susd", 100)
        assert ledger.balances() == (100, 0)
        assert ledger.balance_of("susd") == 100

    def test_credit_accumulates(self, ledger):
        ledger.credit("y", 40)
        ledger.credit("y", 2)
        assert ledger.balance_of("y") == 42

    @pytest.mark.parametrize("amount", [0, -1, 1.5])
    def test_rejects_invalid_amount(self, ledger, amount):
        with pytest.raises(InvalidAmount):
            ledger.credit("susd", amount)
        assert ledger.balances() == (0, 0)

    def test_rejects_unverified_pool(self, ledger):
        with pytest.raises(UnverifiedPool):
            ledger.credit("compound", 10)


class TestTransfer:
    def test_transfer_moves_capital(self, ledger):
        ledger.credit("susd", 100)
        ledger.transfer("susd", "y", 30)
        assert ledger.balances() == (70, 30)
        assert ledger.total == 100

    def test_transfer_full_balance(self, ledger):
        ledger.credit("y", 10)
        ledger.transfer("y", "susd", 10)
        assert ledger.balances() == (10, 0)

    def test_insufficient_liquidity_leaves_ledger_untouched(self, ledger):
        ledger.credit("susd", 10)
        with pytest.raises(InsufficientLiquidity):
            ledger.transfer("susd", "y", 11)
        assert ledger.balances() == (10, 0)

    def test_transfer_to_self_rejected(self, ledger):
        ledger.credit("susd", 10)
        with pytest.raises(InvalidPool):
            ledger.transfer("susd", "susd", 5)
        assert ledger.balances() == (10, 0)

    def test_transfer_with_unverified_pool(self, ledger):
        ledger.credit("susd", 10)
        with pytest.raises(UnverifiedPool):
            ledger.transfer("susd", "compound", 5)

    def test_transfer_rejects_zero(self, ledger):
        ledger.credit("susd", 10)
        with pytest.raises(InvalidAmount):
            ledger.transfer("susd", "y", 0)

    def test_balance_of_unverified_pool(self, ledger):
        with pytest.raises(UnverifiedPool):
            ledger.balance_of("compound")


class TestWriteOff:
    def test_write_off_lowers_total(self, ledger):
        ledger.credit("susd", 10)
        ledger.write_off("susd", 3)
        assert ledger.balances() == (7, 0)
        assert ledger.total == 7

    def test_write_off_beyond_balance(self, ledger):
        ledger.credit("susd", 10)
        with pytest.raises(InsufficientLiquidity):
            ledger.write_off("susd", 11)
        assert ledger.balances() == (10, 0)
