"""
Tests for the leapfrog steppers.
"""

import numpy as np
import pytest

from stringwave.modeling import (
    HomogeneousMedium,
    HomogeneousStepper,
    InitialState,
    InterfaceStepper,
    StringGrid,
    TwoMediumString,
    create_stepper,
    pulse_at_rest,
)


def _spike_state(node_count=5, index=2):
    """Unit displacement on a single node, released at rest."""
    field = np.zeros(node_count)
    field[index] = 1.0
    return InitialState(previous=field.copy(), current=field.copy())
# end def _spike_state


def _reference_step(current, previous, r1_sq, r2_sq, interface_index):
    """Node-by-node evaluation of the stencil, used as a reference."""
    n = len(current)
    next_field = np.zeros(n)
    for i in range(1, n - 1):
        if i < interface_index:
            r_sq = r1_sq
        elif i > interface_index:
            r_sq = r2_sq
        else:
            next_field[i] = (
                2.0 * (1.0 - (r1_sq + r2_sq) / 2.0) * current[i]
                - previous[i]
                + (r1_sq * current[i - 1] + r2_sq * current[i + 1]) / 2.0
            )
            continue
        # end if
        next_field[i] = (
            2.0 * (1.0 - r_sq) * current[i]
            - previous[i]
            + r_sq * (current[i + 1] + current[i - 1])
        )
    # end for
    return next_field
# end def _reference_step


def test_homogeneous_step_by_hand():
    """Two steps of a spike at r = 0.5 match the hand-computed stencil."""
    grid = StringGrid(node_count=5, spacing=1.0)
    stepper = HomogeneousStepper(grid, courant_number=0.5)
    stepper.load(_spike_state())

    first = stepper.advance()
    np.testing.assert_allclose(first, [0.0, 0.25, 0.5, 0.25, 0.0])

    second = stepper.advance()
    np.testing.assert_allclose(second, [0.0, 0.5, -0.125, 0.5, 0.0])
    assert stepper.steps_taken == 2
# end def test_homogeneous_step_by_hand


def test_interface_step_by_hand():
    """The interface node averages the two one-sided stencils."""
    grid = StringGrid(node_count=5, spacing=1.0)
    stepper = InterfaceStepper(grid, left_courant_number=1.0, right_courant_number=0.5, interface_index=2)
    stepper.load(_spike_state())

    frame = stepper.advance()
    np.testing.assert_allclose(frame, [0.0, 1.0, -0.25, 0.25, 0.0])
# end def test_interface_step_by_hand


def test_interface_matches_reference_loop():
    """The vectorised update equals a node-by-node loop over many steps."""
    grid = StringGrid.from_length(1.0, 0.01)
    state = pulse_at_rest(grid, center=0.3, sigma=0.05, amplitude=0.5)
    stepper = InterfaceStepper(grid, left_courant_number=0.8, right_courant_number=0.4, interface_index=50)
    stepper.load(state)

    previous = state.previous.copy()
    current = state.current.copy()
    for _ in range(120):
        expected = _reference_step(current, previous, 0.8 ** 2, 0.4 ** 2, 50)
        frame = stepper.advance()
        np.testing.assert_allclose(frame, expected, rtol=1e-12, atol=1e-14)
        previous, current = current, expected
    # end for
# end def test_interface_matches_reference_loop


def test_equal_speeds_differ_only_inside_interface_light_cone():
    """With equal Courant numbers only the interface node and its light cone depart from the homogeneous run."""
    grid = StringGrid.from_length(1.0, 0.01)
    state = pulse_at_rest(grid, center=0.5, sigma=0.05, amplitude=0.5)
    r_sq = 0.9 ** 2
    k = 50

    homogeneous = HomogeneousStepper(grid, courant_number=0.9)
    interface = InterfaceStepper(grid, left_courant_number=0.9, right_courant_number=0.9, interface_index=k)
    homogeneous.load(state)
    interface.load(state)

    previous, current = state.previous.copy(), state.current.copy()
    for n in range(1, 31):
        expected_k = (
            2.0 * (1.0 - r_sq) * current[k]
            - previous[k]
            + 0.5 * r_sq * (current[k - 1] + current[k + 1])
        )
        reference = homogeneous.advance().copy()
        frame = interface.advance().copy()

        np.testing.assert_allclose(frame[:k - n + 1], reference[:k - n + 1], rtol=1e-12, atol=1e-15)
        np.testing.assert_allclose(frame[k + n:], reference[k + n:], rtol=1e-12, atol=1e-15)
        assert frame[k] == pytest.approx(expected_k, rel=1e-12, abs=1e-15)
        previous, current = current, frame
    # end for

    assert not np.allclose(interface.current, homogeneous.current)
# end def test_equal_speeds_differ_only_inside_interface_light_cone


def test_interface_node_halves_neighbour_term():
    """With equal Courant numbers the interface node still weighs its neighbours by half."""
    grid = StringGrid(node_count=5, spacing=1.0)
    stepper = InterfaceStepper(grid, left_courant_number=0.5, right_courant_number=0.5, interface_index=2)
    stepper.load(_spike_state())

    first = stepper.advance()
    np.testing.assert_allclose(first, [0.0, 0.25, 0.5, 0.25, 0.0])

    second = stepper.advance()
    np.testing.assert_allclose(second, [0.0, 0.5, -0.1875, 0.5, 0.0])
# end def test_interface_node_halves_neighbour_term


def test_buffers_are_rotated_not_reallocated():
    """Stepping reuses the three buffers allocated at construction."""
    grid = StringGrid(node_count=11, spacing=0.1)
    stepper = HomogeneousStepper(grid, courant_number=0.8)
    stepper.load(pulse_at_rest(grid, center=0.5, sigma=0.1, amplitude=1.0))

    buffer_ids = {id(stepper._previous), id(stepper._current), id(stepper._next)}
    for _ in range(7):
        stepper.advance()
        assert {id(stepper._previous), id(stepper._current), id(stepper._next)} == buffer_ids
    # end for
# end def test_buffers_are_rotated_not_reallocated


def test_returned_frame_is_decoupled():
    """Later steps do not alter a frame that was already handed out."""
    grid = StringGrid(node_count=11, spacing=0.1)
    stepper = HomogeneousStepper(grid, courant_number=0.8)
    stepper.load(pulse_at_rest(grid, center=0.5, sigma=0.1, amplitude=1.0))

    frame = stepper.advance()
    snapshot = frame.copy()
    for _ in range(5):
        stepper.advance()
    # end for
    np.testing.assert_array_equal(frame, snapshot)
# end def test_returned_frame_is_decoupled


def test_current_view_follows_rotation():
    """After a step the current field is the frame just produced."""
    grid = StringGrid(node_count=11, spacing=0.1)
    stepper = HomogeneousStepper(grid, courant_number=0.8)
    state = pulse_at_rest(grid, center=0.5, sigma=0.1, amplitude=1.0)
    stepper.load(state)

    frame = stepper.advance()
    np.testing.assert_array_equal(stepper.current, frame)
    np.testing.assert_array_equal(stepper.previous, state.current)
    with pytest.raises(ValueError):
        stepper.current[3] = 1.0
    # end with
# end def test_current_view_follows_rotation


def test_fixed_ends_stay_zero():
    """Endpoints are zero after every step, even with a large Courant number."""
    grid = StringGrid.from_length(1.0, 0.01)
    stepper = HomogeneousStepper(grid, courant_number=1.2)
    stepper.load(pulse_at_rest(grid, center=0.2, sigma=0.05, amplitude=0.5))

    for _ in range(100):
        frame = stepper.advance()
        assert frame[0] == 0.0
        assert frame[-1] == 0.0
    # end for
# end def test_fixed_ends_stay_zero


def test_unstable_courant_number_diverges():
    """r > 1 is accepted and the solution blows up."""
    grid = StringGrid.from_length(1.0, 0.01)
    stepper = HomogeneousStepper(grid, courant_number=1.2)
    stepper.load(pulse_at_rest(grid, center=0.2, sigma=0.05, amplitude=0.5))

    frame = None
    for _ in range(149):
        frame = stepper.advance()
    # end for
    assert np.max(np.abs(frame)) > 1e3
# end def test_unstable_courant_number_diverges


@pytest.mark.parametrize("interface_index", [0, 4, 7])
def test_interface_index_must_be_interior(interface_index):
    """The interface cannot sit on an endpoint or outside the grid."""
    grid = StringGrid(node_count=5, spacing=1.0)
    with pytest.raises(ValueError):
        InterfaceStepper(grid, left_courant_number=0.8, right_courant_number=0.4, interface_index=interface_index)
    # end with
# end def test_interface_index_must_be_interior


def test_load_rejects_wrong_shape():
    """Initial fields must hold one value per node."""
    grid = StringGrid(node_count=5, spacing=1.0)
    stepper = HomogeneousStepper(grid, courant_number=0.5)

    with pytest.raises(ValueError):
        stepper.load(_spike_state(node_count=6))
    # end with
# end def test_load_rejects_wrong_shape


def test_load_resets_stepper():
    """Reloading the same state replays the same trajectory."""
    grid = StringGrid(node_count=21, spacing=0.05)
    stepper = HomogeneousStepper(grid, courant_number=0.7)
    state = pulse_at_rest(grid, center=0.5, sigma=0.1, amplitude=1.0)

    stepper.load(state)
    first_run = [stepper.advance() for _ in range(10)]
    stepper.load(state)
    second_run = [stepper.advance() for _ in range(10)]

    assert stepper.steps_taken == 10
    np.testing.assert_array_equal(np.array(first_run), np.array(second_run))
# end def test_load_resets_stepper


def test_create_stepper_dispatch():
    """Media configurations select the matching stepper."""
    grid = StringGrid.from_length(1.0, 0.01)

    homogeneous = create_stepper(grid, HomogeneousMedium(wave_speed=1.0, courant_number=0.8))
    assert isinstance(homogeneous, HomogeneousStepper)
    assert homogeneous.r_squared == pytest.approx(0.64)

    interface = create_stepper(
        grid,
        TwoMediumString(left_speed=300.0, right_speed=150.0, interface_index=50, courant_number=0.8),
        initial_state=pulse_at_rest(grid, center=0.1, sigma=0.05, amplitude=0.5),
    )
    assert isinstance(interface, InterfaceStepper)
    assert interface.right_courant_number == pytest.approx(0.4)
    assert interface.current[10] == pytest.approx(0.5)
# end def test_create_stepper_dispatch


def test_create_stepper_checks_interface():
    """A two-medium string whose interface falls off the grid is rejected."""
    grid = StringGrid(node_count=11, spacing=0.1)
    medium = TwoMediumString(left_speed=300.0, right_speed=150.0, interface_index=50, courant_number=0.8)

    with pytest.raises(ValueError):
        create_stepper(grid, medium)
    # end with
# end def test_create_stepper_checks_interface
