import math

import numpy as np
import pytest

from pathsmooth import FemWeights, OsqpSettings, compute_path_profile, smooth_path


def test_profile_of_straight_line():
    xy = np.column_stack((np.linspace(0.0, 5.0, 11), np.linspace(0.0, 5.0, 11)))
    profile = compute_path_profile(xy)
    np.testing.assert_allclose(profile.headings, math.pi / 4.0)
    np.testing.assert_allclose(profile.accumulated_s[-1], 5.0 * math.sqrt(2.0))
    np.testing.assert_allclose(profile.kappas, 0.0, atol=1e-12)
    np.testing.assert_allclose(profile.dkappas, 0.0, atol=1e-9)


def test_profile_of_circle_has_constant_curvature():
    radius = 4.0
    t = np.linspace(0.0, math.pi, 181)
    xy = np.column_stack((radius * np.cos(t), radius * np.sin(t)))
    profile = compute_path_profile(xy)
    np.testing.assert_allclose(profile.kappas[2:-2], 1.0 / radius, rtol=1e-3)
    assert profile.accumulated_s[-1] == pytest.approx(math.pi * radius, rel=1e-3)
    assert profile.headings[90] == pytest.approx(math.pi, abs=1e-3) or profile.headings[90] == pytest.approx(
        -math.pi, abs=1e-3
    )


def test_profile_rejects_single_point():
    with pytest.raises(ValueError):
        compute_path_profile(np.zeros((1, 2)))


def test_smooth_path_in_map_frame():
    rng = np.random.default_rng(5)
    x = np.linspace(0.0, 20.0, 30) + 4.5e5
    y = 0.1 * (x - x[0]) + 5.3e6 + rng.normal(0.0, 0.1, x.size)
    raw = np.column_stack((x, y))
    smoothed, info = smooth_path(
        raw,
        0.25,
        weights=FemWeights(smooth=100.0, path_length=1.0, ref_deviation=1.0),
        settings=OsqpSettings(max_iter=10000),
    )
    assert info["success"]
    assert smoothed.shape == raw.shape
    assert info["max_deviation"] <= math.hypot(0.25, 0.25) + 1e-2
    assert np.all(np.abs(smoothed - raw) <= 0.25 + 1e-2)


def test_smooth_path_failure_returns_empty():
    smoothed, info = smooth_path([(0.0, 0.0), (1.0, 1.0)], 0.5)
    assert smoothed.shape == (0, 2)
    assert not info["success"]
    assert info["state"] == "failed"
