"""End-to-end tests of the tracker screen actions."""

import asyncio
from decimal import Decimal

import pytest

from savings_tracker.config import Settings, get_settings, validate_all_settings
from savings_tracker.ledger import LedgerLifecycle, LedgerStore
from savings_tracker.models.audit import LedgerEventType
from savings_tracker.models.ledger import OutcomeKind
from savings_tracker.orchestrator import SavingsTrackerFlow, create_tracker
from savings_tracker.selection import SelectionController
from savings_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    LedgerPersistenceGateway,
)
from tests.helpers import FailingStorage, GatedStorage, RecordingAuditLogger, make_flow


ESUN = "(808)玉山銀行(2884)"
COOP = "(006)合作金庫(5880)"


class TestSelectionController:
    """Tests for label → index routing."""

    def test_known_label_selects(self, catalog, store):
        controller = SelectionController(catalog, store)
        assert controller.on_user_pick(ESUN) is True
        assert store.selected_index == 7

    def test_unknown_label_is_a_no_op(self, catalog, store):
        """A stray label must not crash or move the cursor."""
        store.select_account(4)
        controller = SelectionController(catalog, store)

        assert controller.on_user_pick("Nonexistent Bank") is False
        assert store.selected_index == 4


class TestStart:
    """Tests for the startup load."""

    @pytest.mark.asyncio
    async def test_first_run_is_empty(self):
        flow = make_flow(InMemoryStorage())
        view = await flow.start()

        assert view.selected_index == 0
        assert view.account_label == COOP
        assert view.current_balance == "0"
        assert view.total == "0"
        assert view.has_unsaved_changes is False

    @pytest.mark.asyncio
    async def test_restores_previous_session(self):
        storage = InMemoryStorage({
            "bankSavings": "[1000,0,0,0,0,0,0,250.5,0,0]",
            "selectedIndex": "7",
        })
        view = await make_flow(storage).start()

        assert view.account_label == ESUN
        assert view.current_balance == "250.5"
        assert view.total == "1250.5"

    @pytest.mark.asyncio
    async def test_unreadable_storage_starts_empty(self):
        flow = make_flow(FailingStorage(fail_reads=True))
        view = await flow.start()
        assert view.total == "0"
        assert flow.store.lifecycle == LedgerLifecycle.HYDRATED

    @pytest.mark.asyncio
    async def test_corrupt_storage_starts_empty(self):
        storage = InMemoryStorage({"bankSavings": "garbage", "selectedIndex": "3"})
        flow = make_flow(storage)
        view = await flow.start()

        assert view.selected_index == 0
        assert view.total == "0"
        assert flow.store.last_hydrate_error.startswith("corrupt")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "savings",
        ["[1e1000000,0,0,0,0,0,0,0,0,0]", "[9e999999,9e999999,0,0,0,0,0,0,0,0]", "[" * 100000],
    )
    async def test_pathological_storage_starts_empty(self, savings):
        storage = InMemoryStorage({"bankSavings": savings, "selectedIndex": "1"})
        flow = make_flow(storage)
        view = await flow.start()

        assert view.selected_index == 0
        assert view.total == "0"
        assert flow.store.last_hydrate_error.startswith("corrupt")


class TestModifyAndPick:
    """Tests for in-memory edits."""

    @pytest.mark.asyncio
    async def test_documented_scenario(self):
        flow = make_flow(InMemoryStorage())
        await flow.start()

        view = flow.pick_account(ESUN)
        assert view.selected_index == 7

        outcome = flow.modify_balance("250.5")
        assert outcome.kind == OutcomeKind.MODIFIED
        assert outcome.success
        assert outcome.account_label == ESUN
        assert outcome.amount == "250.5"
        assert outcome.title == "修改成功"
        assert outcome.message == f"銀行: {ESUN}\n存款金額: 250.5"
        assert flow.view().total == "250.5"

        flow.pick_account(COOP)
        flow.modify_balance("1000")
        view = flow.view()
        assert view.total == "1250.5"
        assert view.current_balance == "1000"
        assert view.has_unsaved_changes is True

    @pytest.mark.asyncio
    async def test_rejected_amount(self):
        flow = make_flow(InMemoryStorage())
        await flow.start()
        flow.modify_balance("30")

        outcome = flow.modify_balance("-5")

        assert outcome.kind == OutcomeKind.MODIFY_REJECTED
        assert not outcome.success
        assert outcome.amount is None
        assert outcome.title == "錯誤"
        assert outcome.message == "請輸入有效的存款金額"
        assert "negative" in outcome.reason
        assert flow.view().current_balance == "30"

    @pytest.mark.asyncio
    async def test_overflowing_amount_is_rejected(self):
        """An absurd exponent is a rejected amount, not a crash."""
        flow = make_flow(InMemoryStorage())
        await flow.start()
        flow.modify_balance("30")

        outcome = flow.modify_balance("1e1000000")

        assert outcome.kind == OutcomeKind.MODIFY_REJECTED
        assert outcome.reason == "amount is too large"
        assert flow.view().total == "30"

    @pytest.mark.asyncio
    async def test_unknown_pick_keeps_view(self):
        flow = make_flow(InMemoryStorage())
        await flow.start()
        flow.pick_account(ESUN)

        view = flow.pick_account("(000)Unknown")

        assert view.selected_index == 7

    @pytest.mark.asyncio
    async def test_currency_symbol_in_display(self, catalog):
        flow = SavingsTrackerFlow(
            store=LedgerStore(catalog),
            gateway=LedgerPersistenceGateway(InMemoryStorage()),
            currency_symbol="NT$",
        )
        await flow.start()
        outcome = flow.modify_balance("12.50")
        assert outcome.amount == "NT$12.5"
        assert flow.view().total == "NT$12.5"

    def test_about(self):
        about = make_flow(InMemoryStorage()).about()
        assert about.title
        assert len(about.lines) == 5


class TestSave:
    """Tests for explicit persistence."""

    @pytest.mark.asyncio
    async def test_save_and_reload(self):
        storage = InMemoryStorage()
        flow = make_flow(storage)
        await flow.start()
        flow.pick_account(ESUN)
        flow.modify_balance("250.5")
        flow.pick_account(COOP)
        flow.modify_balance("1000")

        outcome = await flow.save()

        assert outcome.kind == OutcomeKind.SAVED
        assert outcome.success
        assert outcome.amount == "1250.5"
        assert outcome.title == "存檔成功"
        assert outcome.message == "已將存款資料儲存至設備"
        assert flow.view().has_unsaved_changes is False
        assert flow.store.lifecycle == LedgerLifecycle.PERSISTED
        assert storage.dump() == {
            "bankSavings": "[1000,0,0,0,0,0,0,250.5,0,0]",
            "selectedIndex": "0",
        }

        restored = make_flow(storage)
        view = await restored.start()
        assert view.total == "1250.5"
        assert restored.store.balances == flow.store.balances

    @pytest.mark.asyncio
    async def test_edits_are_volatile_until_saved(self):
        storage = InMemoryStorage()
        flow = make_flow(storage)
        await flow.start()
        flow.modify_balance("99")

        assert storage.dump() == {}

    @pytest.mark.asyncio
    async def test_save_failure_is_reported_and_keeps_state(self):
        """A failed save never rolls back in-memory edits."""
        flow = make_flow(FailingStorage(fail_reads=False, fail_writes=True))
        await flow.start()
        flow.modify_balance("500")

        outcome = await flow.save()

        assert outcome.kind == OutcomeKind.SAVE_FAILED
        assert not outcome.success
        assert outcome.title == "存檔失敗"
        assert outcome.message == "無法儲存資料"
        assert outcome.reason
        assert flow.view().current_balance == "500"
        assert flow.view().has_unsaved_changes is True
        assert flow.store.lifecycle == LedgerLifecycle.MUTATED

    @pytest.mark.asyncio
    async def test_outcomes_are_distinguishable(self):
        ok_flow = make_flow(InMemoryStorage())
        await ok_flow.start()
        failing_flow = make_flow(FailingStorage(fail_reads=False))
        await failing_flow.start()

        kinds = {
            ok_flow.modify_balance("1").kind,
            ok_flow.modify_balance("x").kind,
            (await ok_flow.save()).kind,
            (await failing_flow.save()).kind,
        }
        assert len(kinds) == 4

    @pytest.mark.asyncio
    async def test_edit_during_save_waits_for_next_save(self):
        """A save writes the state at call time; later edits stay dirty."""
        storage = GatedStorage()
        flow = make_flow(storage)
        await flow.start()
        flow.modify_balance("100")

        save_task = asyncio.create_task(flow.save())
        await storage.write_started.wait()
        flow.modify_balance("200")
        storage.gate.set()
        outcome = await save_task

        assert outcome.kind == OutcomeKind.SAVED
        assert storage.dump()["bankSavings"] == "[100,0,0,0,0,0,0,0,0,0]"
        assert flow.view().current_balance == "200"
        assert flow.view().has_unsaved_changes is True

        await flow.save()
        assert storage.dump()["bankSavings"] == "[200,0,0,0,0,0,0,0,0,0]"
        assert flow.view().has_unsaved_changes is False

    @pytest.mark.asyncio
    async def test_saved_event_records_the_written_total(self):
        """The log matches what reached the device, not later edits."""
        storage = GatedStorage()
        audit_logger = RecordingAuditLogger()
        flow = make_flow(storage, audit_logger=audit_logger)
        await flow.start()
        flow.modify_balance("100")

        save_task = asyncio.create_task(flow.save())
        await storage.write_started.wait()
        flow.modify_balance("200")
        storage.gate.set()
        outcome = await save_task

        saved = [e for e in audit_logger.events if e.event_type == LedgerEventType.LEDGER_SAVED]
        assert len(saved) == 1
        assert saved[0].details["total"] == "100"
        assert outcome.amount == "100"


class TestCreateTracker:
    """Tests for the factory and configuration."""

    @pytest.fixture(autouse=True)
    def isolated_settings(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SAVINGS_TRACKER_STORAGE_PATH", str(tmp_path / "device" / "store.json"))
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_settings_defaults(self):
        settings = Settings()
        assert settings.storage.savings_key == "bankSavings"
        assert settings.storage.selected_index_key == "selectedIndex"
        assert settings.storage.retry_attempts == 3
        assert settings.app.currency_symbol == ""

    def test_validate_all_settings(self):
        assert validate_all_settings() == {"storage": True, "app": True}

    def test_invalid_retry_attempts_reported(self, monkeypatch):
        monkeypatch.setenv("SAVINGS_TRACKER_STORAGE_RETRY_ATTEMPTS", "0")
        results = validate_all_settings()
        assert results["storage"] is False
        assert "storage_error" in results

    @pytest.mark.asyncio
    async def test_file_backed_sessions(self, tmp_path):
        """Two sessions against the configured file share the ledger."""
        first = create_tracker()
        await first.start()
        first.pick_account(ESUN)
        first.modify_balance("250.5")
        assert (await first.save()).kind == OutcomeKind.SAVED
        assert (tmp_path / "device" / "store.json").exists()

        second = create_tracker()
        view = await second.start()
        assert view.selected_index == 7
        assert second.store.current_balance() == Decimal("250.5")

    @pytest.mark.asyncio
    async def test_recovers_from_undecodable_store_file(self, tmp_path):
        """Starting over a garbled file gives an empty ledger that saves cleanly."""
        path = tmp_path / "device" / "store.json"
        path.parent.mkdir()
        path.write_bytes(b"\xff\xfe garbage")

        flow = create_tracker()
        view = await flow.start()
        assert view.total == "0"

        flow.modify_balance("5")
        assert (await flow.save()).kind == OutcomeKind.SAVED

        view = await create_tracker().start()
        assert view.total == "5"

    @pytest.mark.asyncio
    async def test_explicit_storage(self):
        storage = InMemoryStorage()
        flow = create_tracker(storage=storage)
        await flow.start()
        flow.modify_balance("5")
        await flow.save()
        assert "bankSavings" in storage.dump()
        assert not isinstance(flow.gateway.storage, JsonFileStorage)
