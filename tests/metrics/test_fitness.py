"""Tests for the Fitness-Fatigue model."""

import pytest
from datetime import date, datetime, timedelta

from run_analyzer.metrics.fitness import (
    DailyLoad,
    calculate_ema,
    calculate_fitness_trend,
    ema_decay,
    form_description,
    get_current_fitness,
)


class TestEMA:
    """Tests for exponential moving average steps."""

    def test_decay_constants(self):
        assert ema_decay(42) == pytest.approx(2 / 43)
        assert ema_decay(7) == pytest.approx(0.25)

    def test_step(self):
        assert calculate_ema(100.0, 0.0, 0.25) == pytest.approx(25.0)
        assert calculate_ema(0.0, 40.0, 0.25) == pytest.approx(30.0)


class TestFitnessTrend:
    """Tests for the day-by-day CTL/ATL/TSB fold."""

    def test_empty(self):
        assert calculate_fitness_trend([]) == []
        assert get_current_fitness([]) is None

    def test_single_day(self):
        result = calculate_fitness_trend([DailyLoad(date(2024, 1, 1), 100.0)])
        assert len(result) == 1
        assert result[0].ctl == pytest.approx(100 * 2 / 43)
        assert result[0].atl == pytest.approx(25.0)
        assert result[0].tsb == pytest.approx(result[0].ctl - result[0].atl)

    def test_gaps_filled(self):
        """Every calendar day between the first and last load gets a row."""
        loads = [
            DailyLoad(date(2024, 1, 1), 80.0),
            DailyLoad(date(2024, 1, 10), 60.0),
        ]
        result = calculate_fitness_trend(loads)
        assert len(result) == 10
        assert [m.date for m in result] == [date(2024, 1, 1) + timedelta(days=i) for i in range(10)]
        assert all(m.daily_load == 0.0 for m in result[1:-1])

    def test_same_day_loads_summed(self):
        """Two runs on one day count as one day's load."""
        loads = [
            DailyLoad(datetime(2024, 1, 1, 7, 0), 40.0),
            DailyLoad(datetime(2024, 1, 1, 18, 0), 60.0),
        ]
        result = calculate_fitness_trend(loads)
        assert len(result) == 1
        assert result[0].daily_load == pytest.approx(100.0)

    def test_input_order_irrelevant(self):
        loads = [DailyLoad(date(2024, 1, d), float(d * 10)) for d in range(1, 8)]
        forward = calculate_fitness_trend(loads)
        backward = calculate_fitness_trend(list(reversed(loads)))
        assert [m.ctl for m in forward] == [m.ctl for m in backward]

    def test_short_trend_reacts_faster(self):
        """After a block of steady load, fatigue exceeds fitness and form is negative."""
        start = date(2024, 1, 1)
        loads = [DailyLoad(start + timedelta(days=i), 100.0) for i in range(14)]
        current = get_current_fitness(loads)
        assert current.atl > current.ctl, f"Expected ATL > CTL, got {current.atl} <= {current.ctl}"
        assert current.tsb < 0

    def test_rest_days_decay(self):
        """Rest after training lets ATL drop below CTL."""
        start = date(2024, 1, 1)
        loads = [DailyLoad(start + timedelta(days=i), 100.0) for i in range(14)]
        loads.append(DailyLoad(start + timedelta(days=35), 0.0))
        result = calculate_fitness_trend(loads)
        peak = result[13]
        last = result[-1]
        assert last.atl < peak.atl
        assert last.ctl < peak.ctl
        assert last.tsb > 0, f"Expected positive form after rest, got {last.tsb}"

    def test_to_dict(self):
        result = calculate_fitness_trend([DailyLoad(date(2024, 1, 1), 50.0)])
        data = result[0].to_dict()
        assert data["date"] == "2024-01-01"
        assert data["daily_load"] == 50.0


class TestFormDescription:
    """Tests for TSB descriptions."""

    @pytest.mark.parametrize("tsb,expected", [
        (30, "Very fresh (possibly detrained)"),
        (15, "Fresh and ready to race"),
        (5, "Neutral - good for training"),
        (0, "Slightly fatigued"),
        (-15, "Tired but building fitness"),
        (-25, "Very fatigued - rest needed"),
    ])
    def test_descriptions(self, tsb, expected):
        assert form_description(tsb) == expected
