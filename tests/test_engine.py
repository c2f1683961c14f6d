# -*- coding: utf-8 -*-
import logging

import numpy as np
import numpy.testing as npt
import pytest

from wavepacket2d import (BoundaryMode, ComputationEngine, GridSize, InvalidGridError,
                          SimulationParams, SimulationState, SizeMismatchError, measure)
from wavepacket2d.utils import edge_distance


@pytest.mark.parametrize('grid', [None, GridSize(0, 64), GridSize(64, 0), (-4, 4),
                                  (64.5, 64), (True, 4), ('64', '64'), object()])
def test_invalid_grid(grid):
    with pytest.raises(InvalidGridError):
        ComputationEngine(grid)


def test_non_power_of_two_grid_warns(caplog):
    with caplog.at_level(logging.WARNING, logger='wavepacket2d.grid'):
        engine = ComputationEngine(GridSize(48, 64))

    assert engine.grid == GridSize(48, 64)
    assert 'not powers of 2' in caplog.text


def test_integral_float_grid():
    engine = ComputationEngine((64.0, 32.0))

    assert engine.grid == GridSize(64, 32)
    assert isinstance(engine.grid.width, int)


def test_band_width():
    assert ComputationEngine(GridSize(64, 64)).band_width == 4
    assert ComputationEngine(GridSize(256, 128)).band_width == 6
    assert ComputationEngine(GridSize(512, 512)).band_width == 25


def test_potential_half_step(state, engine):
    state.potential[...] = 0
    state.potential[30, 20] = 2.0
    before = state.psi.copy()

    engine.apply_potential_half_step(state)

    expected = before.copy()
    expected[30, 20] *= np.exp(-1j * 2.0 * state.params.dt / 2)
    npt.assert_allclose(state.psi, expected, rtol=1e-14)


def test_zero_potential_is_skipped(state, engine):
    state.potential[...] = 0
    before = state.psi.copy()

    engine.apply_potential_half_step(state)

    npt.assert_array_equal(state.psi, before)


def test_kinetic_step_with_zero_operator(state, engine):
    state.kinetic_operator[...] = 0
    before = state.psi.copy()

    engine.apply_kinetic_step(state)

    npt.assert_allclose(state.psi, before, atol=1e-14)


def test_strang_reversibility_potential_only(state, engine, rng):
    state.kinetic_operator[...] = 0
    state.potential[1:-1, 1:-1] = rng.uniform(0, 50, (62, 62))
    before = state.psi.copy()

    engine.step(state)
    assert not np.allclose(state.psi, before)

    state.params.dt = -state.params.dt
    engine.step(state)

    npt.assert_allclose(state.psi, before, atol=1e-12)


def test_strang_reversibility(state, engine):
    state.apply_brush(40, 32, 6, strength=5.0)
    before = state.psi.copy()

    for _ in range(10):
        engine.step(state)
    state.params.dt = -state.params.dt
    for _ in range(10):
        engine.step(state)

    npt.assert_allclose(state.psi, before, atol=1e-11)


def test_norm_conserved_with_reflective_walls(state, engine):
    state.apply_brush(40, 32, 6, strength=5.0)
    for _ in range(50):
        engine.step(state)

    assert abs(state.norm() - 1.0) < 1e-9


def test_free_packet_moves_with_group_velocity(state, engine):
    start = measure(state, engine.fft)
    n_steps = 100
    for _ in range(n_steps):
        engine.step(state)
    end = measure(state, engine.fft)

    t = n_steps * state.params.dt
    velocity = state.params.px / state.mass
    npt.assert_allclose(end['x'] - start['x'], velocity * t, atol=0.05)
    npt.assert_allclose(end['y'], start['y'], atol=1e-6)
    npt.assert_allclose(end['px'], start['px'], atol=1e-6)


def test_kinetic_operator_size_mismatch(state, engine):
    state.kinetic_operator = np.zeros((32, 32))
    state.potential[1:-1, 1:-1] = 5.0
    before = state.psi.copy()

    with pytest.raises(SizeMismatchError):
        engine.step(state)

    npt.assert_array_equal(state.psi, before)


def test_state_grid_mismatch(state):
    engine = ComputationEngine(GridSize(32, 64))
    with pytest.raises(SizeMismatchError):
        engine.step(state)
    with pytest.raises(SizeMismatchError):
        engine.apply_potential_half_step(state)


def test_state_resized_after_engine(state, engine):
    state.set_grid(GridSize(128, 128))
    with pytest.raises(SizeMismatchError):
        engine.step(state)


#######################################
#          Absorbing boundary         #
#######################################

def _absorbing_state():
    params = SimulationParams(x0=32.0, y0=32.0, sigma=20.0, px=0.0,
                              boundary_mode=BoundaryMode.ABSORBING)
    return SimulationState(GridSize(64, 64), domain_size=64.0, params=params)


def test_absorbing_boundary_time_step_independent():
    engine = ComputationEngine(GridSize(64, 64))
    fine, coarse = _absorbing_state(), _absorbing_state()
    before = fine.psi.copy()

    fine.params.dt = 0.01
    for _ in range(100):
        engine.apply_absorbing_boundary(fine)
    coarse.params.dt = 0.02
    for _ in range(50):
        engine.apply_absorbing_boundary(coarse)

    band = edge_distance(engine.grid) < engine.band_width
    npt.assert_allclose(np.abs(fine.psi[band]), np.abs(coarse.psi[band]), rtol=1e-6)
    assert np.all(np.abs(fine.psi[band]) < np.abs(before[band]))
    npt.assert_array_equal(fine.psi[~band], before[~band])


def test_absorption_profile():
    engine = ComputationEngine(GridSize(64, 64))
    state = _absorbing_state()
    rate = engine.absorption_rate(state)

    # Deepest band cell (the edge) damps most, nothing outside the band
    assert rate[0, 32] > rate[1, 32] > rate[3, 32] > 0
    assert rate[4, 32] == 0
    assert np.all(rate[4:-4, 4:-4] == 0)
    npt.assert_allclose(rate[0, 32], 0.06 * 4 * state.dx)


def test_absorbing_boundary_off_when_reflective(state, engine):
    before = state.psi.copy()
    engine.apply_absorbing_boundary(state)
    npt.assert_array_equal(state.psi, before)


def test_boundary_mode_mutated_on_params(state, engine):
    assert state.potential[0, 0] == state.params.barrier_energy

    state.params.boundary_mode = 'absorbing'
    engine.step(state)

    assert np.all(state.potential == 0)

    state.params.boundary_mode = BoundaryMode.BOTH
    engine.step(state)

    assert np.all(state.potential[edge_distance(state.grid) == 0]
                  == state.params.barrier_energy)


def test_both_boundary_modes_lose_probability():
    state = _absorbing_state()
    state.set_boundary_mode(BoundaryMode.BOTH)
    engine = ComputationEngine(state.grid)

    assert state.potential[0, 0] == state.params.barrier_energy
    for _ in range(20):
        engine.step(state)

    assert state.norm() < 1.0


#######################################
#           Sub-pixel shift           #
#######################################

def test_subpixel_shift_by_whole_cells(state, engine):
    before = state.psi.copy()

    engine.shift_subpixel(state, 3 * state.dx, -2 * state.dy)

    npt.assert_allclose(state.psi, np.roll(before, (-2, 3), axis=(0, 1)), atol=1e-12)


def test_subpixel_shift_moves_packet(state, engine):
    start = measure(state, engine.fft)
    engine.shift_subpixel(state, 2.5, 0.0)
    end = measure(state, engine.fft)

    npt.assert_allclose(end['x'] - start['x'], 2.5, atol=1e-6)
    assert abs(state.norm() - 1.0) < 1e-9
