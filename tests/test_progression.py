import math
from datetime import timedelta

import pytest

from analytics.stats import config as s_cfg
from analytics.stats.metrics import LINEAR_STAT_KEYS
from analytics.stats.progression import (
    ERR_NO_CURRENT_STATS,
    ERR_NO_DATA,
    ERR_NO_PROGRESS,
    ERR_NOT_ENOUGH_DATA,
    ERR_NOT_IMPLEMENTED,
    ERR_TOO_MANY_POINTS,
    ProgressionError,
    QuotientProgression,
    StatProgression,
    compute_stat_progression,
    next_magnitude_milestone,
)
from analytics.stats.types import ALL_GAMEMODE_KEYS

from tests.builders import T0, T_END, T_TRACKING_END, make_snapshot, with_ratio, with_stat


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_no_history():
    current = make_snapshot()
    for history in (None, []):
        result = compute_stat_progression(history, current, "wins", "overall")
        assert isinstance(result, ProgressionError)
        assert result.error is True
        assert result.reason == ERR_NO_DATA


def test_single_point():
    result = compute_stat_progression([make_snapshot()], make_snapshot(), "wins", "overall")
    assert result == ProgressionError(ERR_NOT_ENOUGH_DATA)


def test_too_many_points():
    history = [make_snapshot(T0), make_snapshot(T0 + timedelta(days=1)), make_snapshot(T_END)]
    result = compute_stat_progression(history, make_snapshot(T_END), "wins", "overall")
    assert result == ProgressionError(ERR_TOO_MANY_POINTS)


def test_no_current_stats():
    history = [make_snapshot(T0), make_snapshot(T_END)]
    result = compute_stat_progression(history, None, "wins", "overall")
    assert result == ProgressionError(ERR_NO_CURRENT_STATS)


def test_zero_length_window():
    history = [with_stat(T0, "overall", "wins", 1), with_stat(T0, "overall", "wins", 5)]
    result = compute_stat_progression(history, history[1], "wins", "overall")
    assert result == ProgressionError(ERR_NOT_ENOUGH_DATA)


@pytest.mark.parametrize("stat", ["index", "winstreak"])
def test_not_implemented(stat):
    history = [make_snapshot(T0), make_snapshot(T_END)]
    result = compute_stat_progression(history, make_snapshot(T_END), stat, "overall")
    assert result == ProgressionError(ERR_NOT_IMPLEMENTED)


@pytest.mark.parametrize("gamemode", ALL_GAMEMODE_KEYS)
def test_linear_no_progress(gamemode):
    history = [with_stat(T0, gamemode, "wins", 100), with_stat(T_END, gamemode, "wins", 100)]
    result = compute_stat_progression(history, history[1], "wins", gamemode)
    assert result == ProgressionError(ERR_NO_PROGRESS)


# ---------------------------------------------------------------------------
# Linear stats
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("gamemode", ALL_GAMEMODE_KEYS)
@pytest.mark.parametrize("stat", ("experience",) + LINEAR_STAT_KEYS)
def test_linear_progression(stat, gamemode):
    scale = 100 if stat == "experience" else 1
    history = [
        with_stat(T0, gamemode, stat, 100 * scale),
        with_stat(T_END, gamemode, stat, 400 * scale),
    ]
    current = with_stat(T_END, gamemode, stat, 450 * scale)

    result = compute_stat_progression(history, current, stat, gamemode, tracking_end=T_TRACKING_END)

    assert isinstance(result, StatProgression)
    assert result.error is False
    assert result.stat == stat
    assert result.tracking_start == T0
    assert result.tracking_end == T_TRACKING_END
    assert result.current_value == 450 * scale
    assert result.next_milestone_value == 500 * scale
    assert result.trending_upward is True
    assert result.progress_per_day == pytest.approx(300 * scale / 31)
    assert result.days_until_milestone == pytest.approx(50 * 31 / 300)
    assert result.reachable


def test_tracking_end_defaults_to_last_snapshot():
    history = [with_stat(T0, "overall", "wins", 100), with_stat(T_END, "overall", "wins", 400)]
    result = compute_stat_progression(history, history[1], "wins", "overall")
    assert result.tracking_end == T_END
    assert result.progress_per_day == pytest.approx(10)
    assert result.days_until_milestone == pytest.approx(10)


def test_linear_large_values():
    history = [with_stat(T0, "overall", "kills", 1_000_000), with_stat(T_END, "overall", "kills", 1_300_000)]
    result = compute_stat_progression(history, history[1], "kills", "overall")
    assert result.next_milestone_value == 2_000_000
    assert result.days_until_milestone == pytest.approx(70)


def test_projected_milestone_date():
    history = [with_stat(T0, "overall", "wins", 100), with_stat(T_END, "overall", "wins", 400)]
    result = compute_stat_progression(history, history[1], "wins", "overall")
    assert result.projected_milestone_date(T_END) == T_END + timedelta(days=10)


# ---------------------------------------------------------------------------
# Stars
# ---------------------------------------------------------------------------


def test_stars_progression():
    history = [
        make_snapshot(T0, experience=s_cfg.PRESTIGE_EXP),
        make_snapshot(T_END, experience=2 * s_cfg.PRESTIGE_EXP),
    ]
    current = make_snapshot(T_END, experience=2.1 * s_cfg.PRESTIGE_EXP)

    result = compute_stat_progression(history, current, "stars", "overall")

    assert isinstance(result, StatProgression)
    assert result.next_milestone_value == 300
    assert result.trending_upward is True
    assert result.progress_per_day == pytest.approx(100 / 30)
    assert result.days_until_milestone == pytest.approx(0.9 * 30)
    assert 200 < result.current_value < 300


def test_stars_without_exp_gain_is_unreachable():
    history = [make_snapshot(T0, experience=1000), make_snapshot(T_END, experience=1000)]
    result = compute_stat_progression(history, history[1], "stars", "solo")
    assert result.next_milestone_value == 100
    assert math.isinf(result.days_until_milestone)
    assert not result.reachable
    assert result.projected_milestone_date(T_END) is None


# ---------------------------------------------------------------------------
# Quotients
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("gamemode", ALL_GAMEMODE_KEYS)
@pytest.mark.parametrize("stat", ["fkdr", "kdr"])
def test_quotient_upward(stat, gamemode):
    history = [with_ratio(T0, gamemode, stat, 100, 50), with_ratio(T_END, gamemode, stat, 400, 100)]
    current = with_ratio(T_END, gamemode, stat, 450, 105)

    result = compute_stat_progression(history, current, stat, gamemode, tracking_end=T_TRACKING_END)

    assert isinstance(result, QuotientProgression)
    assert result.current_value == pytest.approx(450 / 105)
    assert result.next_milestone_value == 5
    assert result.trending_upward is True
    assert result.session_quotient == 6
    assert result.dividend_per_day == pytest.approx(300 / 31)
    assert result.divisor_per_day == pytest.approx(50 / 31)
    assert result.days_until_milestone == pytest.approx(46.5)
    assert result.progress_per_day == pytest.approx((5 - 450 / 105) / 46.5)


@pytest.mark.parametrize("gamemode", ALL_GAMEMODE_KEYS)
@pytest.mark.parametrize("stat", ["fkdr", "kdr"])
def test_quotient_downward(stat, gamemode):
    history = [with_ratio(T0, gamemode, stat, 500, 50), with_ratio(T_END, gamemode, stat, 600, 200)]
    current = with_ratio(T_END, gamemode, stat, 610, 205)

    result = compute_stat_progression(history, current, stat, gamemode, tracking_end=T_TRACKING_END)

    assert result.trending_upward is False
    assert result.next_milestone_value == 2
    assert result.days_until_milestone == pytest.approx(31)
    assert result.progress_per_day < 0


def test_quotient_milestone_past_session_ratio_is_unreachable():
    history = [with_ratio(T0, "overall", "fkdr", 100, 50), with_ratio(T_END, "overall", "fkdr", 250, 100)]
    current = with_ratio(T_END, "overall", "fkdr", 260, 104)

    result = compute_stat_progression(history, current, "fkdr", "overall", tracking_end=T_TRACKING_END)

    assert result.trending_upward is True
    assert result.session_quotient == 3
    assert result.next_milestone_value == 3
    assert math.isinf(result.days_until_milestone)
    assert result.progress_per_day == 0


def test_quotient_without_session_progress():
    history = [with_ratio(T0, "overall", "kdr", 250, 100), with_ratio(T_END, "overall", "kdr", 250, 100)]

    result = compute_stat_progression(history, history[1], "kdr", "overall")

    assert isinstance(result, QuotientProgression)
    assert result.trending_upward is True
    assert result.next_milestone_value == 3
    assert math.isinf(result.days_until_milestone)
    assert result.progress_per_day == 0


def test_quotient_zero_divisors_projects_dividend():
    history = [with_ratio(T0, "overall", "fkdr", 100, 0), with_ratio(T_END, "overall", "fkdr", 400, 0)]
    current = with_ratio(T_END, "overall", "fkdr", 450, 0)

    result = compute_stat_progression(history, current, "fkdr", "overall")

    assert isinstance(result, QuotientProgression)
    assert result.current_value == 450
    assert result.next_milestone_value == 500
    assert result.trending_upward is True
    assert result.days_until_milestone == pytest.approx(5)
    assert result.progress_per_day == pytest.approx(10)
    assert result.dividend_per_day == pytest.approx(10)
    assert result.divisor_per_day == 0
    assert result.session_quotient == 300


def test_quotient_zero_divisors_without_progress():
    history = [with_ratio(T0, "overall", "fkdr", 100, 0), with_ratio(T_END, "overall", "fkdr", 100, 0)]
    result = compute_stat_progression(history, history[1], "fkdr", "overall")
    assert result == ProgressionError(ERR_NO_PROGRESS)


def test_quotient_no_deaths_yet():
    history = [with_ratio(T0, "overall", "fkdr", 90, 0), with_ratio(T_END, "overall", "fkdr", 150, 0)]
    result = compute_stat_progression(history, history[1], "fkdr", "overall")
    assert result.next_milestone_value == 200
    assert result.days_until_milestone == pytest.approx(25)


def test_quotient_no_session_deaths_trends_upward():
    history = [with_ratio(T0, "overall", "fkdr", 4077, 1), with_ratio(T_END, "overall", "fkdr", 4185, 1)]

    result = compute_stat_progression(history, history[1], "fkdr", "overall")

    assert result.current_value == 4185
    assert result.trending_upward is True
    assert result.next_milestone_value == 4186
    assert result.session_quotient == 108
    assert result.days_until_milestone == pytest.approx(1 / 3.6)
    assert result.progress_per_day == pytest.approx(3.6)


# ---------------------------------------------------------------------------
# Milestones
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value, milestone",
    [(427, 500), (1000, 2000), (0, 1), (0.4, 1), (9, 10), (99, 100), (10, 20), (12345, 20000)],
)
def test_next_magnitude_milestone(value, milestone):
    assert next_magnitude_milestone(value) == milestone
