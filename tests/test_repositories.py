# tests/test_repositories.py
"""
测试账户/交易/LLM 配置仓储（内存 SQLite）
"""
from datetime import datetime, timedelta, timezone

import pytest
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI

from tradejournal_core.data.models import LLMConfig, Trade
from tradejournal_core.data.repositories import (
    AccountRepository,
    LLMConfigRepository,
    TradeRepository,
)
from tradejournal_core.errors import InvalidInputError, NoActiveAccountError, NotFoundError
from tradejournal_core.services.analytics import AnalyticsService
from tradejournal_core.services.llm_factory import LLMFactory
from tradejournal_core.utils import as_utc, utc_now


@pytest.fixture
def accounts(session):
    return AccountRepository(session)


@pytest.fixture
def trades(session):
    return TradeRepository(session)


@pytest.fixture
def account(accounts):
    return accounts.create("user-1", "Main", currency="usd", start_balance=1000)


class TestAccountRepository:

    def test_create(self, account):
        assert account.id is not None
        assert account.currency == "USD"
        assert account.start_balance == 1000

    @pytest.mark.parametrize("name,balance", [("", 100), ("  ", 100), ("Main", -1)])
    def test_create_rejects_invalid(self, accounts, name, balance):
        with pytest.raises(InvalidInputError):
            accounts.create("user-1", name, start_balance=balance)

    def test_list_scoped_and_ordered(self, accounts):
        accounts.create("user-1", "Zeta")
        accounts.create("user-1", "Alpha")
        accounts.create("user-2", "Beta")

        assert [a.name for a in accounts.list_for_user("user-1")] == ["Alpha", "Zeta"]

    def test_active_falls_back_to_first_by_name(self, accounts):
        assert accounts.get_active("user-1") is None

        accounts.create("user-1", "Zeta")
        alpha = accounts.create("user-1", "Alpha")

        assert accounts.get_active("user-1").id == alpha.id

    def test_set_active(self, accounts):
        accounts.create("user-1", "Alpha")
        zeta = accounts.create("user-1", "Zeta")

        accounts.set_active("user-1", zeta.id)
        assert accounts.get_active("user-1").id == zeta.id

    def test_set_active_foreign_account(self, accounts):
        other = accounts.create("user-2", "Theirs")

        with pytest.raises(NotFoundError):
            accounts.set_active("user-1", other.id)

    def test_delete_active_repoints(self, accounts, trades):
        alpha = accounts.create("user-1", "Alpha")
        beta = accounts.create("user-1", "Beta")
        accounts.set_active("user-1", alpha.id)
        trades.create(alpha.id, "EUR/USD", 0.1, "Breakout", "buy", 10)

        accounts.delete("user-1", alpha.id)

        assert accounts.get_by_id(alpha.id) is None
        assert trades.list_for_account(alpha.id) == []
        assert accounts.get_active("user-1").id == beta.id

    def test_delete_last_account(self, accounts, account):
        accounts.delete("user-1", account.id)

        assert accounts.get_active("user-1") is None

    def test_delete_missing(self, accounts):
        with pytest.raises(NotFoundError):
            accounts.delete("user-1", 999)


class TestTradeRepository:

    def test_create_assigns_timestamp(self, trades, account):
        trade = trades.create(account.id, "EUR/USD", 0.1, "Breakout", "buy", 50, notes="clean setup")

        assert trade.id is not None
        assert trade.created_at is not None
        assert trade.pl == 50
        assert not trade.is_withdrawal

    def test_created_at_round_trip(self, session, trades, account):
        t0 = datetime(2024, 1, 1, 9, 30, 15, 250000, tzinfo=timezone.utc)
        trade = trades.create(account.id, "EUR/USD", 0.1, "Breakout", "buy", 50, created_at=t0)

        session.expire_all()
        loaded = trades.get_by_id(trade.id)

        assert as_utc(loaded.created_at) == t0

    def test_naive_created_at_stored_as_utc(self, session, trades, account):
        trade = trades.create(account.id, "EUR/USD", 0.1, "Breakout", "buy", 50, created_at=datetime(2024, 1, 1, 9))

        session.expire_all()
        loaded = trades.get_by_id(trade.id)

        assert as_utc(loaded.created_at) == datetime(2024, 1, 1, 9, tzinfo=timezone.utc)

    def test_withdrawal_and_account_timestamps(self, session, trades, account):
        before = utc_now()
        wd = trades.add_withdrawal(account.id, 25)

        session.expire_all()
        assert before <= as_utc(trades.get_by_id(wd.id).created_at) <= utc_now()
        assert as_utc(account.created_at) <= before

    @pytest.mark.parametrize("fields", [
        {"pair": "", "position": "buy", "lot_size": 0.1},
        {"pair": "EUR/USD", "position": "hold", "lot_size": 0.1},
        {"pair": "EUR/USD", "position": "buy", "lot_size": -1},
        {"pair": "WITHDRAWAL", "position": "buy", "lot_size": 0},
    ])
    def test_create_rejects_invalid(self, trades, account, fields):
        with pytest.raises(InvalidInputError):
            trades.create(account.id, strategy="x", pl=1, **fields)

    def test_withdrawal(self, trades, account):
        trade = trades.add_withdrawal(account.id, 200)

        assert trade.is_withdrawal
        assert trade.pair == "WITHDRAWAL"
        assert trade.position == "wd"
        assert trade.lot_size == 0
        assert trade.pl == -200
        assert trade.notes == "Withdrawal of 200"

    @pytest.mark.parametrize("amount", [0, -5])
    def test_withdrawal_amount_must_be_positive(self, trades, account, amount):
        with pytest.raises(InvalidInputError):
            trades.add_withdrawal(account.id, amount)

    def test_update_keeps_created_at(self, trades, account):
        trade = trades.create(account.id, "EUR/USD", 0.1, "Breakout", "buy", 50)
        created_at = trade.created_at

        updated = trades.update(trade.id, account.id, pl=-10, notes="moved stop", created_at=datetime(2000, 1, 1))

        assert updated.pl == -10
        assert updated.notes == "moved stop"
        assert updated.created_at == created_at

    def test_update_withdrawal_rejected(self, trades, account):
        wd = trades.add_withdrawal(account.id, 50)

        with pytest.raises(InvalidInputError):
            trades.update(wd.id, account.id, pl=10)

    def test_trades_scoped_to_account(self, trades, accounts, account):
        other = accounts.create("user-2", "Other")
        trade = trades.create(account.id, "EUR/USD", 0.1, "Breakout", "buy", 50)

        with pytest.raises(NotFoundError):
            trades.delete(trade.id, other.id)

    def test_delete(self, trades, account):
        trade = trades.create(account.id, "EUR/USD", 0.1, "Breakout", "buy", 50)
        trades.delete(trade.id, account.id)

        assert trades.get_by_id(trade.id) is None

    def test_list_ordering(self, trades, account):
        t0 = datetime(2024, 1, 1)
        late = trades.create(account.id, "B", 0.1, "", "buy", 1, created_at=t0 + timedelta(days=1))
        early = trades.create(account.id, "A", 0.1, "", "buy", 1, created_at=t0)

        assert [t.id for t in trades.list_for_account(account.id)] == [late.id, early.id]
        assert [t.id for t in trades.list_for_account(account.id, descending=False)] == [early.id, late.id]

    def test_bulk_create_all_or_nothing(self, trades, account):
        rows = [
            {"pair": "EUR/USD", "lot_size": 0.1, "strategy": "Imported", "position": "buy", "pl": 5},
            {"pair": "EUR/USD", "lot_size": 0.1, "strategy": "Imported", "position": "nope", "pl": 5},
        ]
        with pytest.raises(InvalidInputError):
            trades.bulk_create(account.id, rows)

        assert trades.list_for_account(account.id) == []

        created = trades.bulk_create(account.id, rows[:1])
        assert len(created) == 1
        assert isinstance(created[0], Trade)


class TestLLMConfigRepository:

    def test_default_and_switch(self, session):
        repo = LLMConfigRepository(session)
        first = repo.save(LLMConfig(name="a", provider="openai", model_name="gpt-4o-mini", is_default=True))
        second = repo.save(LLMConfig(name="b", provider="ollama", model_name="llama3"))

        assert repo.get_default().id == first.id
        repo.set_as_default(second.id)
        assert repo.get_default().id == second.id
        assert repo.get_by_name("a").is_default is False
        assert len(repo.get_all()) == 2

    def test_langchain_kwargs(self):
        config = LLMConfig(name="x", model_name="gpt-4o", base_url="http://llm", api_key="k", temperature=0.2)

        assert config.to_langchain_kwargs() == {
            "model": "gpt-4o",
            "temperature": 0.2,
            "max_retries": 3,
            "base_url": "http://llm",
            "api_key": "k",
        }


class TestAnalyticsService:

    def test_report_for_user(self, session, accounts, trades, account):
        t0 = datetime(2024, 1, 1)
        trades.create(account.id, "EUR/USD", 0.1, "Breakout", "buy", 50, created_at=t0)
        trades.create(account.id, "EUR/USD", 0.1, "Breakout", "sell", -20, created_at=t0 + timedelta(hours=1))
        trades.create(account.id, "GBP/USD", 0.1, "Scalping", "buy", 30, created_at=t0 + timedelta(hours=2))
        trades.add_withdrawal(account.id, 100)

        report = AnalyticsService(session).report_for_user("user-1")

        assert report.summary.total_trades == 3
        assert report.summary.current_balance == 960
        assert report.equity_curve[-1].balance == 960
        assert report.pair_performance["EUR/USD"].total_pl == 30

    def test_no_account(self, session):
        with pytest.raises(NoActiveAccountError):
            AnalyticsService(session).report_for_user("nobody")


class TestLLMFactory:

    def test_create_from_name(self, session):
        LLMConfigRepository(session).save(
            LLMConfig(name="local", provider="ollama", model_name="llama3", api_key="ignored")
        )

        llm = LLMFactory(session).create_from_name("local")

        assert isinstance(llm, ChatOllama)
        assert llm.model == "llama3"

    def test_create_default_openai(self, session):
        LLMConfigRepository(session).save(
            LLMConfig(name="default", provider="openai", model_name="gpt-4o-mini", api_key="sk-test", is_default=True)
        )

        assert isinstance(LLMFactory(session).create_default(), ChatOpenAI)

    def test_disabled_or_missing(self, session):
        repo = LLMConfigRepository(session)
        repo.save(LLMConfig(name="off", provider="openai", model_name="gpt-4o", is_enabled=False))
        factory = LLMFactory(session)

        with pytest.raises(ValueError, match="disabled"):
            factory.create_from_name("off")
        with pytest.raises(ValueError, match="not found"):
            factory.create_from_name("missing")
        with pytest.raises(ValueError, match="No default"):
            factory.create_default()
