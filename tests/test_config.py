import logging

import pytest

from mazerace.config import Settings, load_settings, to_argv, MAX_GRID_SIZE, MIN_GRID_SIZE
from mazerace.core.types import InvalidConfiguration

pytestmark = pytest.mark.unit


def test_defaults():
    s = load_settings(env={}, argv=[])
    assert s == Settings()
    assert (s.rows, s.cols) == (15, 15)
    assert s.animation_speed_ms == 50
    assert s.run_both_pause_ms == 500
    assert s.path_delay_factor == 1.5


def test_env_then_cli_precedence():
    env = {"MAZERACE_GRID_SIZE": "20", "MAZERACE_DENSITY": "10", "MAZERACE_SPEED_MS": "80"}
    s = load_settings(env=env, argv=["--size=25", "--mode=ignored"])
    assert s.grid_size == 25
    assert s.obstacle_density_percent == 10
    assert s.animation_speed_ms == 80


@pytest.mark.parametrize("argv", [
    ["--size=abc"],
    ["--size=4"],
    [f"--size={MAX_GRID_SIZE + 1}"],
    ["--density=101"],
    ["--speed=-5"],
])
def test_bad_values_raise(argv):
    with pytest.raises(InvalidConfiguration):
        load_settings(env={}, argv=argv)


def test_with_changes_clamps():
    s = Settings()
    assert s.with_changes(grid_size=1).grid_size == MIN_GRID_SIZE
    assert s.with_changes(obstacle_density_percent=150).obstacle_density_percent == 100
    assert s.with_changes(animation_speed_ms=-10).animation_speed_ms == 0
    assert s.grid_size == 15


def test_to_argv_feeds_back_into_loader():
    s = Settings(grid_size=30, obstacle_density_percent=5, animation_speed_ms=120)
    assert load_settings(env={}, argv=to_argv(s)) == s


def test_with_changes_passes_unbounded_fields_through():
    s = Settings().with_changes(path_delay_factor=2.5, run_both_pause_ms=900, grid_size=70)
    assert s.path_delay_factor == 2.5
    assert s.run_both_pause_ms == 900
    assert s.grid_size == MAX_GRID_SIZE


def test_rejected_settings_are_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="mazerace.config"):
        with pytest.raises(InvalidConfiguration):
            Settings(obstacle_density_percent=120).validate()
    assert "obstacle_density_percent" in caplog.text
