"""
Life Engine Baseline Validation

Tests engine construction (noise seeding and APG placement), the two-phase
generation step and classic pattern behavior: still lifes stay put,
oscillators return after their period, gliders translate.
"""

from unittest import mock

import numpy as np
import pytest
from apglife.core.conway import LifeConfig, LifeEngine
from apglife.core.conway_rules import CellState
from apglife.core.noise import Perlin
from apglife.core.rng import Rng
from apglife.errors import (
    InvalidParameterError, OutOfBoundsError, UnencodableError, UnknownCharacterError
)

GLIDER = "xq4_153"
BLOCK = "xs4_33"
BLINKER = "xp2_7"


def translate(cells, dx, dy):
    return {(x + dx, y + dy) for x, y in cells}


class TestLifeConfig:
    """Test configuration validation."""

    def test_valid_config(self):
        """Positive dimensions with or without a pattern are accepted."""
        config = LifeConfig(32, 16, pattern=GLIDER)
        assert (config.width, config.height, config.pattern) == (32, 16, GLIDER)
        assert LifeConfig(1, 1).pattern is None

    @pytest.mark.parametrize("width,height", [(0, 8), (8, 0), (-3, 8), (8.5, 8), (True, 8)])
    def test_invalid_dimensions(self, width, height):
        """Dimensions must be positive integers."""
        with pytest.raises(InvalidParameterError):
            LifeConfig(width, height)

    def test_numpy_integer_dimensions(self):
        """Config accepts the same integer types as the grid."""
        config = LifeConfig(np.int64(12), np.int32(10), pattern=BLOCK)
        engine = LifeEngine(config)

        assert (config.width, config.height) == (12, 10)
        assert type(config.width) is int
        assert (engine.width, engine.height) == (12, 10)

    def test_invalid_pattern_type(self):
        """Pattern must be a string."""
        with pytest.raises(InvalidParameterError, match="pattern must be a string"):
            LifeConfig(8, 8, pattern=153)

    def test_from_env(self, monkeypatch):
        """Environment variables configure the grid."""
        monkeypatch.setenv("APGLIFE_WIDTH", "40")
        monkeypatch.setenv("APGLIFE_HEIGHT", "30")
        monkeypatch.setenv("APGLIFE_PATTERN", BLOCK)

        config = LifeConfig.from_env()
        assert (config.width, config.height, config.pattern) == (40, 30, BLOCK)

    def test_from_env_defaults(self, monkeypatch):
        """Missing variables fall back to a 64x64 noise-seeded grid."""
        for name in ("APGLIFE_WIDTH", "APGLIFE_HEIGHT", "APGLIFE_PATTERN"):
            monkeypatch.delenv(name, raising=False)

        config = LifeConfig.from_env()
        assert (config.width, config.height, config.pattern) == (64, 64, None)

    def test_from_env_invalid(self, monkeypatch):
        """Non-integer dimensions in the environment are rejected."""
        monkeypatch.setenv("APGLIFE_WIDTH", "wide")

        with pytest.raises(InvalidParameterError):
            LifeConfig.from_env()


class TestNoiseSeeding:
    """Test pattern-less construction."""

    def test_noise_and_coin_flip_both_required(self):
        """Cells come alive exactly where noise > 0.5 and the coin flip succeeds."""
        noise = Perlin()
        rng = mock.Mock(spec=Rng)
        rng.random_bool.return_value = True

        engine = LifeEngine(LifeConfig(16, 16), noise=noise, rng=rng)

        expected = {(x, y) for y in range(16) for x in range(16) if noise.noise(x, y) > 0.5}
        assert set(engine.live_cells()) == expected
        for call in rng.random_bool.call_args_list:
            assert call == mock.call(0.35)

    def test_failed_coin_flip_keeps_cells_dead(self):
        """High noise alone does not make a cell alive."""
        noise = mock.Mock(spec=Perlin)
        noise.noise.return_value = 1.0
        rng = mock.Mock(spec=Rng)
        rng.random_bool.return_value = False

        engine = LifeEngine(LifeConfig(8, 8), noise=noise, rng=rng)

        assert engine.is_extinct()
        assert rng.random_bool.call_count == 64

    def test_noise_threshold_is_strict(self):
        """Noise exactly at 0.5 never seeds a cell or consults the coin."""
        noise = mock.Mock(spec=Perlin)
        noise.noise.return_value = 0.5
        rng = mock.Mock(spec=Rng)
        rng.random_bool.return_value = True

        engine = LifeEngine(LifeConfig(8, 8), noise=noise, rng=rng)

        assert engine.population() == 0
        rng.random_bool.assert_not_called()

    def test_full_seeding(self):
        """Both conditions passing everywhere fills the grid."""
        noise = mock.Mock(spec=Perlin)
        noise.noise.return_value = 0.9
        rng = mock.Mock(spec=Rng)
        rng.random_bool.return_value = True

        engine = LifeEngine(LifeConfig(6, 4), noise=noise, rng=rng)

        assert engine.population() == 24
        assert engine.apg is None

    def test_default_sources(self):
        """Without injected sources the engine seeds itself randomly."""
        engine = LifeEngine(LifeConfig(24, 24))

        assert 0 <= engine.population() <= 24 * 24
        assert engine.generation == 0


class TestPatternPlacement:
    """Test APG-based construction."""

    def test_origin(self):
        """Pattern origin is (width//2 - 5, height//2 - 5)."""
        engine = LifeEngine(LifeConfig(21, 30, pattern=BLOCK))
        assert engine.pattern_origin() == (5, 10)

    def test_block_placement(self):
        """Block lands at the origin."""
        engine = LifeEngine(LifeConfig(20, 20, pattern=BLOCK))

        assert set(engine.live_cells()) == {(5, 5), (6, 5), (5, 6), (6, 6)}
        assert engine.apg.period == 1

    def test_glider_placement(self):
        """Glider cells match the decoded columns."""
        engine = LifeEngine(LifeConfig(20, 20, pattern=GLIDER))

        assert set(engine.live_cells()) == {(5, 5), (6, 5), (7, 5), (7, 6), (6, 7)}

    def test_placement_out_of_bounds(self):
        """Patterns that do not fit propagate OutOfBoundsError."""
        with pytest.raises(OutOfBoundsError):
            LifeEngine(LifeConfig(8, 8, pattern=GLIDER))

    def test_smallest_fitting_grid(self):
        """A 10x10 grid puts the origin at (0, 0)."""
        engine = LifeEngine(LifeConfig(10, 10, pattern=GLIDER))
        assert engine.pattern_origin() == (0, 0)
        assert engine.population() == 5

    def test_invalid_patterns_propagate(self):
        """Decoder and prefix errors surface from the constructor."""
        with pytest.raises(UnknownCharacterError):
            LifeEngine(LifeConfig(20, 20, pattern="xq4_15!"))

        with pytest.raises(UnencodableError):
            LifeEngine(LifeConfig(20, 20, pattern="xx4_153"))


class TestLifeBaseline:
    """Test fundamental Conway behaviors to ensure correct implementation."""

    def test_empty_grid_stays_empty(self):
        """All-dead grid is a fixed point of step()."""
        noise = mock.Mock(spec=Perlin)
        noise.noise.return_value = 0.0
        engine = LifeEngine(LifeConfig(10, 10), noise=noise, rng=mock.Mock(spec=Rng))
        before = engine.grid.copy()

        for _ in range(5):
            engine.step()

        assert engine.grid == before
        assert engine.generation == 5

    def test_block_stable_still_life(self):
        """2x2 block remains stable."""
        engine = LifeEngine(LifeConfig(12, 12, pattern=BLOCK))
        initial = set(engine.live_cells())

        populations = engine.run(20)

        assert populations == [4] * 20
        assert set(engine.live_cells()) == initial

    def test_blinker_oscillates_period_2(self):
        """Vertical blinker flips to horizontal and back."""
        engine = LifeEngine(LifeConfig(12, 12, pattern=BLINKER))
        initial = set(engine.live_cells())
        assert initial == {(1, 1), (1, 2), (1, 3)}

        engine.step()
        assert set(engine.live_cells()) == {(0, 2), (1, 2), (2, 2)}

        engine.step()
        assert set(engine.live_cells()) == initial
        assert engine.apg.period == 2

    def test_glider_translates_after_period(self):
        """Glider returns to its shape shifted one cell diagonally every 4 steps."""
        engine = LifeEngine(LifeConfig(20, 20, pattern=GLIDER))
        initial = set(engine.live_cells())
        period = engine.apg.period
        assert period == 4

        populations = engine.run(period)
        assert populations == [5, 5, 5, 5]
        assert set(engine.live_cells()) == translate(initial, 1, -1)

        engine.run(period)
        assert set(engine.live_cells()) == translate(initial, 2, -2)

    def test_glider_intermediate_phases_differ(self):
        """Glider does not repeat before its period."""
        engine = LifeEngine(LifeConfig(20, 20, pattern=GLIDER))
        initial = set(engine.live_cells())

        for _ in range(3):
            engine.step()
            shape = set(engine.live_cells())
            assert shape != initial
            assert all(translate(shape, -dx, -dy) != initial
                       for dx in (-1, 0, 1) for dy in (-1, 0, 1))

    def test_step_deterministic(self):
        """Identical grids step to identical grids."""
        engine1 = LifeEngine(LifeConfig(24, 24))
        engine2 = LifeEngine(LifeConfig(24, 24, pattern=BLOCK))
        engine2.grid = engine1.grid.copy()

        for _ in range(5):
            engine1.step()
            engine2.step()
            assert engine1.grid == engine2.grid

    def test_lonely_cells_die(self):
        """Isolated cells die of underpopulation."""
        engine = LifeEngine(LifeConfig(10, 10, pattern="xs2_1z1"))
        assert engine.population() == 2

        engine.step()
        assert engine.is_extinct()

    def test_string_rendering(self):
        """String form shows live cells as X."""
        engine = LifeEngine(LifeConfig(12, 12, pattern=BLOCK))
        lines = str(engine).split('\n')

        assert len(lines) == 12
        assert lines[1] == '.XX.........'
        assert lines[0] == '.' * 12
        assert 'alive=4' in repr(engine)
