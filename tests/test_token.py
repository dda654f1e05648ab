import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from energy_token.errors import LedgerError, LedgerErrorKind
from energy_token.models import (
    BurnNotification,
    MintNotification,
    TokenConfig,
    TokenMetadata,
    TransferNotification,
)
from energy_token.token import EnergyToken
from tests.conftest import ADMIN, ALICE, BOB, MALLORY, MINTER


class TestEnergyToken:
    def test_token_identity(self, token):
        assert token.get_name() == "EnerGridX Energy Token"
        assert token.get_symbol() == "EGX"
        assert token.get_decimals() == 6
        assert token.get_token_metadata() == TokenMetadata(
            name="EnerGridX Energy Token", symbol="EGX", decimals=6
        )

    def test_initial_state(self, token):
        assert token.get_admin() == ADMIN
        assert not token.is_paused()
        assert token.get_total_supply() == 0
        assert token.get_balance(ALICE) == 0
        assert token.get_supply_per_source("solar") == 0
        assert token.get_total_carbon() == 0
        assert token.get_average_carbon_footprint() == 0
        assert token.get_next_mint_id() == 0
        assert token.get_mint_event(0) is None
        assert not token.check_is_minter(MINTER)
        assert not token.check_is_blacklisted(ALICE)

    def test_mint_round_trip(self, minter_token, make_ctx):
        notification = minter_token.mint(make_ctx(MINTER, 100), ALICE, 1000, "solar", 50)

        assert isinstance(notification, MintNotification)
        assert notification.mint_id == 0
        assert minter_token.get_balance(ALICE) == 1000
        assert minter_token.get_total_supply() == 1000
        assert minter_token.get_supply_per_source("solar") == 1000
        assert minter_token.get_total_carbon() == 50_000
        assert minter_token.get_average_carbon_footprint() == 50

        event = minter_token.get_mint_event(0)
        assert event.minter == MINTER
        assert event.recipient == ALICE
        assert event.amount == 1000
        assert event.source == "solar"
        assert event.carbon_footprint == 50
        assert event.block_height == 100

    def test_mint_records_block_height_per_call(self, minter_token, make_ctx):
        minter_token.mint(make_ctx(MINTER, 10), ALICE, 1, "solar", 1)
        minter_token.mint(make_ctx(MINTER, 25), BOB, 1, "wind", 1)

        assert [e.block_height for e in minter_token.get_mint_events()] == [10, 25]

    def test_non_minter_mint_leaves_state_unchanged(self, minter_token, make_ctx):
        before = minter_token.snapshot()

        with pytest.raises(LedgerError) as exc_info:
            minter_token.mint(make_ctx(MALLORY), ALICE, 1000, "solar", 50)

        assert exc_info.value.kind == LedgerErrorKind.NOT_MINTER
        assert exc_info.value.code == 107
        assert minter_token.snapshot() == before
        assert minter_token.notifications == []

    def test_max_supply_failure_leaves_state_unchanged(self, make_ctx, admin_ctx):
        token = EnergyToken(ADMIN, config=TokenConfig(max_supply=1_000))
        token.add_minter(admin_ctx, MINTER)
        token.mint(make_ctx(MINTER), ALICE, 400, "solar", 5)
        before = token.snapshot()

        token.mint(make_ctx(MINTER), BOB, 600, "wind", 2)
        assert token.get_total_supply() == 1_000

        at_cap = token.snapshot()
        with pytest.raises(LedgerError) as exc_info:
            token.mint(make_ctx(MINTER), BOB, 1, "wind", 2)

        assert exc_info.value.kind == LedgerErrorKind.MAX_SUPPLY_REACHED
        assert token.snapshot() == at_cap
        assert token.snapshot() != before
        assert token.get_next_mint_id() == 2

    def test_failed_mint_does_not_consume_mint_id(self, minter_token, minter_ctx):
        minter_token.mint(minter_ctx, ALICE, 10, "solar", 1)

        with pytest.raises(LedgerError):
            minter_token.mint(minter_ctx, ALICE, 0, "solar", 1)

        assert minter_token.get_next_mint_id() == 1
        notification = minter_token.mint(minter_ctx, ALICE, 10, "solar", 1)
        assert notification.mint_id == 1

    def test_deny_list_transfer_scenario(self, funded_token, admin_ctx, make_ctx):
        alice_ctx = make_ctx(ALICE)
        funded_token.blacklist_address(admin_ctx, ALICE)
        assert funded_token.check_is_blacklisted(ALICE)

        with pytest.raises(LedgerError) as exc_info:
            funded_token.transfer(alice_ctx, BOB, 200)
        assert exc_info.value.kind == LedgerErrorKind.DENIED
        assert funded_token.get_balance(ALICE) == 500
        assert funded_token.get_balance(BOB) == 0

        funded_token.unblacklist_address(admin_ctx, ALICE)
        notification = funded_token.transfer(alice_ctx, BOB, 200)

        assert isinstance(notification, TransferNotification)
        assert funded_token.get_balance(ALICE) == 300
        assert funded_token.get_balance(BOB) == 200

    def test_pause_scenario(self, funded_token, admin_ctx, minter_ctx, make_ctx):
        assert funded_token.set_paused(admin_ctx, True) is True

        for call in (
            lambda: funded_token.mint(minter_ctx, ALICE, 10, "solar", 1),
            lambda: funded_token.burn(make_ctx(ALICE), 10),
            lambda: funded_token.transfer(make_ctx(ALICE), BOB, 10),
        ):
            with pytest.raises(LedgerError) as exc_info:
                call()
            assert exc_info.value.kind == LedgerErrorKind.PAUSED

        funded_token.admin_transfer(admin_ctx, ALICE, BOB, 300)
        assert funded_token.get_balance(ALICE) == 200
        assert funded_token.get_balance(BOB) == 300

    def test_burn(self, funded_token, make_ctx):
        notification = funded_token.burn(make_ctx(ALICE), 200)

        assert isinstance(notification, BurnNotification)
        assert funded_token.get_balance(ALICE) == 300
        assert funded_token.get_total_supply() == 300
        assert funded_token.get_supply_per_source("solar") == 500

    def test_notifications_are_recorded_in_order(self, funded_token, admin_ctx, make_ctx):
        funded_token.transfer(make_ctx(ALICE), BOB, 100)
        funded_token.burn(make_ctx(BOB), 50)
        funded_token.admin_transfer(admin_ctx, ALICE, BOB, 100)

        assert [n.event for n in funded_token.notifications] == [
            "mint",
            "transfer",
            "burn",
            "adminTransfer",
        ]
        assert funded_token.notifications[3].model_dump(by_alias=True) == {
            "event": "adminTransfer",
            "admin": ADMIN,
            "from": ALICE,
            "to": BOB,
            "amount": 100,
        }

    def test_listeners_receive_committed_notifications(self, minter_token, minter_ctx):
        received = []

        def listener(notification):
            # Listener runs after commit, so the new state is visible
            received.append((notification, minter_token.get_balance(ALICE)))

        minter_token.subscribe(listener)
        minter_token.mint(minter_ctx, ALICE, 10, "solar", 1)

        with pytest.raises(LedgerError):
            minter_token.mint(minter_ctx, ALICE, -1, "solar", 1)

        minter_token.unsubscribe(listener)
        minter_token.mint(minter_ctx, ALICE, 10, "solar", 1)

        assert len(received) == 1
        assert received[0][0].mint_id == 0
        assert received[0][1] == 10

    def test_supply_per_source_accumulates(self, minter_token, minter_ctx, make_ctx):
        minter_token.mint(minter_ctx, ALICE, 100, "solar", 10)
        minter_token.mint(minter_ctx, BOB, 50, "solar", 20)
        minter_token.mint(minter_ctx, BOB, 70, "wind", 0)
        minter_token.burn(make_ctx(BOB), 120)

        assert minter_token.get_all_supply_per_source() == {"solar": 150, "wind": 70}
        assert minter_token.get_total_supply() == 100
        assert minter_token.get_total_carbon() == 2000
        assert minter_token.get_average_carbon_footprint() == 20

    def test_removed_minter_cannot_mint(self, minter_token, admin_ctx, minter_ctx):
        minter_token.remove_minter(admin_ctx, MINTER)

        with pytest.raises(LedgerError) as exc_info:
            minter_token.mint(minter_ctx, ALICE, 10, "solar", 1)
        assert exc_info.value.kind == LedgerErrorKind.NOT_MINTER

    def test_snapshot_is_isolated_from_later_operations(self, funded_token, make_ctx):
        snapshot = funded_token.snapshot()
        funded_token.transfer(make_ctx(ALICE), BOB, 100)

        assert snapshot.balance_of(ALICE) == 500
        assert funded_token.get_balance(ALICE) == 400

    def test_resume_from_state(self, funded_token):
        resumed = EnergyToken(BOB, config=funded_token.config, state=funded_token.snapshot())

        assert resumed.get_admin() == ADMIN
        assert resumed.get_balance(ALICE) == 500
        assert resumed.get_next_mint_id() == 1

    def test_rejection_is_logged(self, minter_token, make_ctx, caplog):
        caplog.set_level(logging.WARNING, logger="energy_token")

        with pytest.raises(LedgerError):
            minter_token.mint(make_ctx(MALLORY), ALICE, 10, "solar", 1)

        assert any(
            "mint rejected" in record.getMessage() and "NOT_MINTER" in record.getMessage()
            for record in caplog.records
        )

    def test_admin_commit_is_logged(self, token, admin_ctx, caplog):
        caplog.set_level(logging.INFO, logger="energy_token")

        token.add_minter(admin_ctx, MINTER)

        commits = [
            record for record in caplog.records
            if record.levelno == logging.INFO and "committed" in record.getMessage()
        ]
        assert len(commits) == 1
        assert commits[0].getMessage() == (
            f"add_minter committed by {ADMIN} at height {admin_ctx.block_height}"
        )

    def test_unexpected_error_is_logged_and_raised(self, token, admin_ctx, caplog):
        caplog.set_level(logging.ERROR, logger="energy_token")
        before = token.snapshot()

        def broken(state, ctx):
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            token._execute("broken", admin_ctx, broken)

        errors = [record for record in caplog.records if record.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].getMessage() == "Unexpected error during broken"
        assert errors[0].exc_info is not None
        assert errors[0].exc_info[0] is ValueError
        assert token.snapshot() == before
        assert token.notifications == []

    def test_error_to_dict(self, token, make_ctx):
        with pytest.raises(LedgerError) as exc_info:
            token.set_paused(make_ctx(MALLORY), True)

        error = exc_info.value.to_dict()
        assert error["code"] == 100
        assert error["error_type"] == "not_authorized"
        assert error["details"] == {"operation": "set_paused", "caller": MALLORY}


class TestConcurrency:
    def test_concurrent_mints_respect_max_supply(self, admin_ctx, make_ctx):
        token = EnergyToken(ADMIN, config=TokenConfig(max_supply=100))
        token.add_minter(admin_ctx, MINTER)

        def attempt(i):
            try:
                token.mint(make_ctx(MINTER, i), ALICE, 10, "solar", 1)
                return True
            except LedgerError as e:
                assert e.kind == LedgerErrorKind.MAX_SUPPLY_REACHED
                return False

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(attempt, range(25)))

        assert results.count(True) == 10
        assert token.get_total_supply() == 100
        assert token.get_next_mint_id() == 10
        assert sorted(n.mint_id for n in token.notifications) == list(range(10))

    def test_concurrent_transfers_conserve_supply(self, admin_ctx, make_ctx):
        token = EnergyToken(ADMIN, config=TokenConfig())
        token.add_minter(admin_ctx, MINTER)
        token.mint(make_ctx(MINTER), ALICE, 1_000, "wind", 3)
        token.mint(make_ctx(MINTER), BOB, 1_000, "wind", 3)

        def shuffle(i):
            sender, recipient = (ALICE, BOB) if i % 2 else (BOB, ALICE)
            token.transfer(make_ctx(sender), recipient, 7)

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(shuffle, range(100)))

        assert token.get_balance(ALICE) + token.get_balance(BOB) == 2_000
        assert token.get_total_supply() == 2_000
