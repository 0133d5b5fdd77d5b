"""Tests for math utility functions."""

from __future__ import annotations

import numpy as np

from formata.core.utils.math import clamp, lerp, spread_steps


def test_clamp_within_range():
    """Test clamping values within range."""
    assert clamp(5, 0, 10) == 5
    assert clamp(0, 0, 10) == 0
    assert clamp(10, 0, 10) == 10


def test_clamp_outside_range():
    """Test clamping values outside the range."""
    assert clamp(-5, 0, 10) == 0
    assert clamp(101.5, 0.0, 100.0) == 100.0


def test_lerp_basic():
    """Test basic linear interpolation."""
    assert lerp(10.0, 90.0, 0.0) == 10.0
    assert lerp(10.0, 90.0, 1.0) == 90.0
    assert lerp(10.0, 90.0, 0.5) == 50.0


def test_lerp_result_type():
    """Test that lerp returns float."""
    assert isinstance(lerp(0, 10, 0.5), float)


def test_spread_steps_even_spacing():
    """Offsets cover the extent from first to last item."""
    np.testing.assert_allclose(spread_steps(4, 60.0), [0.0, 20.0, 40.0, 60.0])


def test_spread_steps_single_item_at_origin():
    """A single item sits at offset 0."""
    np.testing.assert_allclose(spread_steps(1, 60.0), [0.0])


def test_spread_steps_empty():
    """Zero items produce an empty array."""
    assert spread_steps(0, 60.0).shape == (0,)
