"""
Tests for the Gaussian initial conditions.
"""

import math

import numpy as np
import pytest

from stringwave.modeling import (
    StringGrid,
    gaussian_profile,
    packet_profile,
    pulse_at_rest,
    traveling_packet,
)


def test_gaussian_profile_peak_and_width():
    """The pulse peaks at its center and drops to exp(-1/2) one sigma away."""
    positions = np.array([0.15, 0.2, 0.25])
    profile = gaussian_profile(positions, center=0.2, sigma=0.05, amplitude=0.5)

    assert profile[1] == pytest.approx(0.5)
    assert profile[0] == pytest.approx(0.5 * math.exp(-0.5))
    assert profile[2] == pytest.approx(0.5 * math.exp(-0.5))
# end def test_gaussian_profile_peak_and_width


def test_packet_profile_has_no_half_factor():
    """The packet drops to exp(-1) one sigma away from its center."""
    positions = np.array([3.0, 4.2])
    profile = packet_profile(positions, center=3.0, sigma=1.2, amplitude=1.0)

    assert profile[0] == pytest.approx(1.0)
    assert profile[1] == pytest.approx(math.exp(-1.0))
# end def test_packet_profile_has_no_half_factor


def test_pulse_at_rest_reference_values():
    """Frame 0 samples A exp(-(x - x0)^2 / (2 sigma^2)) at every interior node."""
    grid = StringGrid.from_length(1.0, 0.01)
    state = pulse_at_rest(grid, center=0.2, sigma=0.05, amplitude=0.5)

    expected = [
        0.5 * math.exp(-((i * 0.01 - 0.2) ** 2) / (2 * 0.05 ** 2))
        for i in range(grid.node_count)
    ]
    np.testing.assert_allclose(state.frames[0][1:-1], expected[1:-1], rtol=1e-13, atol=0.0)
    assert state.frames[0][20] == pytest.approx(0.5)
# end def test_pulse_at_rest_reference_values


def test_pulse_at_rest_clamps_endpoints():
    """Endpoints are exactly zero even when the profile is not."""
    grid = StringGrid(node_count=11, spacing=0.1)
    state = pulse_at_rest(grid, center=0.0, sigma=0.3, amplitude=1.0)

    for field in (state.previous, state.current, *state.frames):
        assert field[0] == 0.0
        assert field[-1] == 0.0
    # end for
    assert state.current[1] > 0.5
# end def test_pulse_at_rest_clamps_endpoints


def test_pulse_at_rest_has_zero_velocity():
    """Both time levels are equal and recorded as two frames."""
    grid = StringGrid.from_length(1.0, 0.01)
    state = pulse_at_rest(grid, center=0.2, sigma=0.05, amplitude=0.5)

    assert len(state.frames) == 2
    np.testing.assert_array_equal(state.previous, state.current)
    np.testing.assert_array_equal(state.frames[0], state.frames[1])
# end def test_pulse_at_rest_has_zero_velocity


def test_pulse_at_rest_fields_are_independent():
    """Changing one level does not leak into the other or into the frames."""
    grid = StringGrid(node_count=5, spacing=0.25)
    state = pulse_at_rest(grid, center=0.5, sigma=0.2, amplitude=1.0)

    state.current[2] = 42.0
    assert state.previous[2] != 42.0
    assert state.frames[1][2] != 42.0
# end def test_pulse_at_rest_fields_are_independent


def test_traveling_packet_taylor_step():
    """The earlier level is u0 - dt * v0 with v0 = -c du/dx."""
    grid = StringGrid.from_node_count(12.0, 150)
    wave_speed = 1.2
    dt = 0.8 * grid.spacing / wave_speed
    state = traveling_packet(grid, center=3.0, sigma=1.2, amplitude=1.0, wave_speed=wave_speed, time_step=dt)

    x = grid.positions()
    u0 = np.exp(-((x - 3.0) ** 2) / 1.2 ** 2)
    v0 = -wave_speed * u0 * (-2.0 * (x - 3.0)) / 1.2 ** 2

    np.testing.assert_allclose(state.current[1:-1], u0[1:-1], rtol=1e-12)
    np.testing.assert_allclose(state.previous[1:-1], (u0 - dt * v0)[1:-1], rtol=1e-12, atol=1e-15)
    assert len(state.frames) == 1
    np.testing.assert_array_equal(state.frames[0], state.current)
# end def test_traveling_packet_taylor_step


def test_traveling_packet_clamps_endpoints():
    """Packet endpoints are forced to zero at both levels."""
    grid = StringGrid.from_node_count(12.0, 150)
    state = traveling_packet(grid, center=3.0, sigma=1.2, amplitude=1.0, wave_speed=1.2, time_step=0.05)

    for field in (state.previous, state.current):
        assert field[0] == 0.0
        assert field[-1] == 0.0
    # end for
# end def test_traveling_packet_clamps_endpoints


def test_traveling_packet_earlier_level_lags_behind():
    """Before t = 0 a right-going packet sat further left."""
    grid = StringGrid.from_node_count(12.0, 150)
    state = traveling_packet(grid, center=3.0, sigma=1.2, amplitude=1.0, wave_speed=1.2, time_step=0.05)

    x = grid.positions()
    left_of_center = (x > 1.5) & (x < 3.0)
    right_of_center = (x > 3.0) & (x < 4.5)
    assert np.all(state.previous[left_of_center] > state.current[left_of_center])
    assert np.all(state.previous[right_of_center] < state.current[right_of_center])
# end def test_traveling_packet_earlier_level_lags_behind


def test_pulse_at_rest_log(capsys):
    """With log=True the pulse parameters are printed."""
    grid = StringGrid.from_length(1.0, 0.01)
    pulse_at_rest(grid, center=0.2, sigma=0.05, amplitude=0.5, log=True)

    output = capsys.readouterr().out
    assert "Building Gaussian pulse at rest" in output
    assert "Center" in output
    assert "0.05" in output
    assert "Amplitude" in output
# end def test_pulse_at_rest_log


def test_traveling_packet_log(capsys):
    """With log=True the packet parameters are printed; silent otherwise."""
    grid = StringGrid.from_node_count(12.0, 150)
    traveling_packet(grid, center=3.0, sigma=1.2, amplitude=1.0, wave_speed=1.2, time_step=0.05)
    assert capsys.readouterr().out == ""

    traveling_packet(grid, center=3.0, sigma=1.2, amplitude=1.0, wave_speed=1.2, time_step=0.05, log=True)
    output = capsys.readouterr().out
    assert "Building travelling Gaussian packet" in output
    assert "Wave speed" in output
# end def test_traveling_packet_log
