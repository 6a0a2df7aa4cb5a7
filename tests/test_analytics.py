# tests/test_analytics.py
"""
测试交易绩效聚合
"""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from tradejournal_core.services.analytics import (
    EquityPoint,
    GroupStats,
    best_performer,
    best_performers,
    build_report,
    calculate_equity_curve,
    group_performance,
    is_withdrawal,
    pair_performance,
    strategy_performance,
    summary_metrics,
    trading_trades,
    worst_performer,
    worst_performers,
)


class TestEquityCurve:
    """资金曲线"""

    def test_final_balance(self, sample_trades):
        curve = calculate_equity_curve(sample_trades, 1000)

        assert len(curve) == 4
        assert curve[0].balance == 1000
        assert curve[-1].balance == 1060
        assert [p.balance for p in curve] == [1000, 1050, 1030, 1060]

    def test_starts_at_earliest_timestamp(self, sample_trades, base_time):
        curve = calculate_equity_curve(list(reversed(sample_trades)), 1000)

        assert curve[0].timestamp == base_time
        assert [p.timestamp for p in curve[1:]] == sorted(t["created_at"] for t in sample_trades)
        assert curve[-1].balance == 1060

    def test_empty_list_single_point(self):
        now = datetime(2024, 6, 1)
        curve = calculate_equity_curve([], 500, now=now)

        assert curve == [EquityPoint(timestamp=now, balance=500)]

    def test_withdrawal_reduces_balance(self, sample_trades, withdrawal):
        curve = calculate_equity_curve(sample_trades + [withdrawal], 1000)

        assert len(curve) == 5
        assert curve[-1].balance == 860

    def test_records_without_timestamp_skipped(self, sample_trades):
        pending = {"pair": "USD/JPY", "pl": 999, "strategy": "News", "created_at": None}
        curve = calculate_equity_curve([sample_trades[0], pending, *sample_trades[1:]], 1000)

        assert len(curve) == 4
        assert curve[-1].balance == 1060

    def test_stable_on_equal_timestamps(self, base_time):
        trades = [
            {"pair": "A", "pl": 10, "created_at": base_time},
            {"pair": "B", "pl": -30, "created_at": base_time},
            {"pair": "C", "pl": 5, "created_at": base_time},
        ]
        curve = calculate_equity_curve(trades, 100)

        assert [p.balance for p in curve] == [100, 110, 80, 85]

    def test_accepts_camel_case_and_objects(self, base_time):
        trades = [
            {"pair": "EUR/USD", "pl": 10, "createdAt": base_time + timedelta(minutes=5)},
            SimpleNamespace(pair="GBP/USD", pl=-4, strategy="x", created_at=base_time),
        ]
        curve = calculate_equity_curve(trades, 0)

        assert [p.balance for p in curve] == [0, -4, 6]

    def test_mixed_naive_and_aware_timestamps(self):
        trades = [
            {"pair": "A", "pl": 10, "created_at": datetime(2024, 1, 1, 12, tzinfo=timezone(timedelta(hours=2)))},
            {"pair": "B", "pl": -4, "created_at": datetime(2024, 1, 1, 11)},
            {"pair": "C", "pl": 1, "created_at": datetime(2024, 1, 1, 9, tzinfo=timezone.utc)},
        ]
        curve = calculate_equity_curve(trades, 0)

        # 12:00+02:00 = 10:00 UTC; 不带时区的 11:00 按 UTC 处理
        assert [p.balance for p in curve] == [0, 1, 11, 7]

    def test_input_not_modified(self, sample_trades):
        snapshot = [dict(t) for t in reversed(sample_trades)]
        original = [dict(t) for t in snapshot]
        calculate_equity_curve(snapshot, 1000)

        assert snapshot == original


class TestGroupPerformance:
    """品种/策略统计"""

    def test_pair_example(self, sample_trades):
        stats = pair_performance(sample_trades)

        eur = stats["EUR/USD"]
        assert eur.total_pl == 30
        assert eur.trades == 2
        assert eur.wins == 1
        assert eur.losses == 1
        assert eur.win_rate == 50
        assert eur.average_pl == 15

        gbp = stats["GBP/USD"]
        assert gbp.trades == 1
        assert gbp.win_rate == 100

    def test_strategy_grouping(self, sample_trades):
        stats = strategy_performance(sample_trades)

        assert set(stats) == {"Breakout", "Scalping"}
        assert stats["Breakout"].total_pl == 30
        assert stats["Scalping"].total_pl == 30

    def test_withdrawals_excluded(self, sample_trades, withdrawal):
        pairs = pair_performance(sample_trades + [withdrawal])
        strategies = strategy_performance(sample_trades + [withdrawal])

        assert "WITHDRAWAL" not in pairs
        assert "Withdrawal" not in strategies

    def test_totals_match_non_withdrawal_sum(self, sample_trades, withdrawal):
        trades = sample_trades + [withdrawal]
        expected = sum(t["pl"] for t in trades if t["pair"] != "WITHDRAWAL")

        assert sum(s.total_pl for s in pair_performance(trades).values()) == expected
        assert sum(s.total_pl for s in strategy_performance(trades).values()) == expected

    def test_zero_pl_counts_as_trade_only(self):
        trades = [
            {"pair": "EUR/USD", "pl": 0, "strategy": "A"},
            {"pair": "EUR/USD", "pl": 10, "strategy": "A"},
            {"pair": "EUR/USD", "pl": -5, "strategy": "A"},
        ]
        stats = pair_performance(trades)["EUR/USD"]

        assert stats.trades == 3
        assert stats.wins == 1
        assert stats.losses == 1
        assert stats.zeros == 1
        assert stats.trades == stats.wins + stats.losses + stats.zeros
        assert 0 <= stats.win_rate <= 100

    def test_custom_key(self, sample_trades):
        stats = group_performance(sample_trades, key=lambda t: t["position"])

        assert stats["buy"].total_pl == 80
        assert stats["sell"].total_pl == -20

    def test_empty_input(self):
        assert pair_performance([]) == {}
        assert strategy_performance([]) == {}

    def test_missing_strategy_grouped_under_empty_name(self):
        stats = strategy_performance([{"pair": "EUR/USD", "pl": 5}])

        assert list(stats) == [""]


class TestPerformers:
    """最佳/最差表现"""

    def test_best_and_worst(self):
        stats = {
            "EUR/USD": GroupStats(total_pl=30, trades=2),
            "GBP/USD": GroupStats(total_pl=-10, trades=1),
            "USD/JPY": GroupStats(total_pl=5, trades=1),
        }

        assert best_performer(stats).name == "EUR/USD"
        assert worst_performer(stats).name == "GBP/USD"

    def test_tie_broken_by_name(self, sample_trades):
        best = best_performers(sample_trades)
        worst = worst_performers(sample_trades)

        # EUR/USD and GBP/USD both net +30
        assert best.pair.name == "EUR/USD"
        assert worst.pair.name == "EUR/USD"
        assert best.strategy.name == "Breakout"

    def test_absent_when_no_trades(self, withdrawal):
        assert best_performer({}) is None
        assert worst_performer({}) is None

        best = best_performers([withdrawal])
        assert best.pair is None
        assert best.strategy is None


class TestSummaryMetrics:
    """汇总指标"""

    def test_summary(self, sample_trades, withdrawal):
        summary = summary_metrics(sample_trades + [withdrawal], 1000)

        assert summary.total_pl == -140
        assert summary.current_balance == 860
        assert summary.total_trades == 3
        assert summary.win_rate == pytest.approx(200 / 3)
        assert summary.profit_percentage == pytest.approx(-14.0)

    def test_zero_start_balance(self, sample_trades):
        summary = summary_metrics(sample_trades, 0)

        assert summary.profit_percentage == 0
        assert summary.current_balance == 60

    def test_empty(self):
        summary = summary_metrics([], 500)

        assert summary.total_pl == 0
        assert summary.current_balance == 500
        assert summary.win_rate == 0
        assert summary.total_trades == 0

    def test_prompt_text(self, sample_trades):
        text = summary_metrics(sample_trades, 1000).to_prompt_text("USD")

        assert "Total Trades: 3" in text
        assert "Total P/L: +60.00 USD" in text
        assert "No trades" in summary_metrics([], 10).to_prompt_text()


def test_withdrawal_helpers(sample_trades, withdrawal):
    assert is_withdrawal(withdrawal)
    assert not is_withdrawal(sample_trades[0])
    assert trading_trades(sample_trades + [withdrawal]) == sample_trades


def test_build_report_empty():
    now = datetime(2024, 6, 1)
    report = build_report([], 500, now=now)

    assert len(report.equity_curve) == 1
    assert report.equity_curve[0].balance == 500
    assert report.pair_performance == {}
    assert report.strategy_performance == {}
    assert report.best.pair is None
    assert report.worst.strategy is None


def test_build_report(sample_trades, withdrawal):
    report = build_report(sample_trades + [withdrawal], 1000)

    assert report.summary.current_balance == 860
    assert report.equity_curve[-1].balance == 860
    assert set(report.pair_performance) == {"EUR/USD", "GBP/USD"}
    assert report.best.strategy.name == "Breakout"
