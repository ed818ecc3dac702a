import pytest

from tracker.models import Position
from tracker.services.derived_fields import (
    calculate_pnl_percent,
    default_stop_loss,
    nearest_resistance_above,
    nearest_support_below,
    recompute,
)


def make_position(**kwargs):
    values = {"ticker": "ABC", "entry_price": 100.0, "current_price": None, "pnl": 0.0, "profit_loss": 0.0}
    values.update(kwargs)
    return Position(**values)


def test_pnl_percent_formula():
    assert calculate_pnl_percent(100.0, 110.0) == pytest.approx(10.0)
    assert calculate_pnl_percent(80.0, 76.0) == pytest.approx(-5.0)


def test_pnl_percent_needs_both_prices():
    assert calculate_pnl_percent(100.0, None) is None
    assert calculate_pnl_percent(None, 100.0) is None


def test_default_stop_loss_without_supports():
    assert default_stop_loss(100.0) == pytest.approx(95.0)
    assert default_stop_loss(100.0, []) == pytest.approx(95.0)


def test_stop_loss_is_nearest_support_below_entry():
    assert default_stop_loss(100.0, [90, 97, 102]) == 97


def test_supports_all_above_entry_fall_back_to_default():
    assert default_stop_loss(100.0, [101, 120]) == pytest.approx(95.0)


def test_level_at_entry_price_does_not_qualify():
    assert nearest_support_below([100, 98], 100.0) == 98
    assert nearest_resistance_above([100, 104, 110], 100.0) == 104
    assert nearest_resistance_above([90, 100], 100.0) is None


def test_recompute_sets_pnl_and_profit_loss():
    position = recompute(make_position(current_price=104.0))
    assert position.pnl == pytest.approx(4.0)
    assert position.profit_loss == pytest.approx(4.0)


def test_recompute_keeps_last_pnl_when_price_missing():
    position = make_position(pnl=7.5, profit_loss=7.5)
    recompute(position, changed=("current_price",))
    assert position.pnl == 7.5


def test_recompute_derives_thresholds_from_changed_levels():
    position = make_position(stop_loss=95.0, support_levels=[88, 93], resistance_levels=[115, 108])
    recompute(position, changed=("support_levels", "resistance_levels"))
    assert position.stop_loss == 93
    assert position.take_profit == 108


def test_explicit_stop_loss_wins_over_levels():
    position = make_position(stop_loss=91.0, support_levels=[93])
    recompute(position, changed=("support_levels", "stop_loss"))
    assert position.stop_loss == 91.0


def test_unchanged_levels_do_not_touch_stop_loss():
    position = make_position(stop_loss=80.0, support_levels=[93])
    recompute(position)
    assert position.stop_loss == 80.0


def test_changed_resistance_without_qualifying_level_clears_take_profit():
    position = make_position(take_profit=105.0, resistance_levels=[90, 95])
    recompute(position, changed=("resistance_levels",))
    assert position.take_profit is None
