# -*- coding: utf-8 -*-
import logging

import numpy as np
import numpy.testing as npt
import pytest

from wavepacket2d import (BoundaryMode, GridSize, InvalidGridError, ShiftPolicy,
                          SimulationParams, SimulationState, measure)
from wavepacket2d.utils import edge_mask


def test_construction(state):
    assert state.grid == GridSize(64, 64)
    assert state.psi.shape == state.potential.shape == (64, 64)
    assert state.kinetic_operator.shape == (64, 64)
    assert state.dx == state.dy == 1.0
    assert state.last_clamp_events == []


def test_default_construction():
    state = SimulationState()
    assert state.grid == GridSize(256, 256)
    assert abs(state.norm() - 1.0) < 1e-9


def test_norm_after_reset(state):
    state.psi *= 3
    state.reset_wave_function()
    assert abs(state.norm() - 1.0) < 1e-9


def test_non_square_norm():
    state = SimulationState(GridSize(128, 64), domain_size=32.0,
                            params=SimulationParams(x0=16.0, y0=16.0, sigma=2.0, px=0.5))
    assert state.dx == 0.25 and state.dy == 0.5
    assert abs(state.norm() - 1.0) < 1e-9


def test_reset_uses_mutated_params(state):
    state.params.x0 = 40.0
    state.params.y0 = 10.0
    state.reset_wave_function()

    row, col = np.unravel_index(np.argmax(np.abs(state.psi)), state.psi.shape)
    assert (row, col) == (10, 40)


def test_nyquist_clamp_on_reset(state, caplog):
    state.params.px = 1000.0
    limit = 0.9 * np.pi / state.dx * state.hbar

    with caplog.at_level(logging.WARNING, logger='wavepacket2d.operators'):
        events = state.reset_wave_function()

    assert abs(state.params.px) <= limit
    assert len(events) == 1 and events[0].axis == 'px'
    assert state.last_clamp_events == events
    assert 'Nyquist' in caplog.text
    assert abs(state.norm() - 1.0) < 1e-9


@pytest.mark.parametrize('sigma', [0.0, -2.0])
def test_reset_rejects_non_positive_sigma(state, sigma):
    before = state.psi.copy()
    state.params.sigma = sigma

    with pytest.raises(ValueError):
        state.reset_wave_function()

    npt.assert_array_equal(state.psi, before)
    assert not np.any(np.isnan(state.psi))


@pytest.mark.parametrize('grid', [GridSize(0, 64), GridSize(64, -8),
                                  (64.5, 64), ('a', 'b'), 64])
def test_invalid_grid(grid):
    with pytest.raises(InvalidGridError):
        SimulationState(grid)


def test_set_grid_missing(state):
    with pytest.raises(InvalidGridError):
        state.set_grid(None)


def test_set_grid(state):
    state.set_grid(GridSize(32, 16), domain_size=16.0)

    assert state.psi.shape == state.potential.shape == (16, 32)
    assert state.kinetic_operator.shape == (16, 32)
    assert state.dx == 0.5 and state.dy == 1.0
    assert abs(state.norm() - 1.0) < 1e-9


def test_precompute_kinetic_operator_after_domain_change(state):
    before = state.kinetic_operator.copy()
    state.domain_size = 32.0
    state.precompute_kinetic_operator()

    npt.assert_allclose(state.kinetic_operator, before * 4)


#######################################
#          Boundary potential         #
#######################################

def test_reflective_walls(state):
    mask = edge_mask(state.grid)
    assert np.all(state.potential[mask] == state.params.barrier_energy)
    assert np.all(state.potential[~mask] == 0)


def test_boundary_mode_switch(state):
    mask = edge_mask(state.grid)

    state.set_boundary_mode('absorbing')
    assert np.all(state.potential == 0)

    state.set_boundary_mode(BoundaryMode.BOTH)
    assert np.all(state.potential[mask] == state.params.barrier_energy)


def test_sync_boundaries_after_params_mutation(state):
    mask = edge_mask(state.grid)

    state.params.boundary_mode = 'absorbing'
    state.sync_boundaries()
    assert np.all(state.potential == 0)

    state.apply_brush(32, 32, 5)
    before = state.potential.copy()
    state.sync_boundaries()
    npt.assert_array_equal(state.potential, before)

    state.params.boundary_mode = BoundaryMode.REFLECTIVE
    state.sync_boundaries()
    assert np.all(state.potential[mask] == state.params.barrier_energy)


def test_update_boundaries_idempotent(state):
    state.apply_brush(32, 32, 5)
    before = state.potential.copy()

    state.update_boundaries()
    state.update_boundaries()

    npt.assert_array_equal(state.potential, before)


def test_brush(state):
    state.apply_brush(20, 30, radius=4, strength=50.0)

    assert state.potential[30, 20] == 50.0
    npt.assert_allclose(state.potential[30, 22], 25.0)
    assert state.potential[30, 25] == 0

    state.apply_brush(20, 30, radius=4, erase=True)
    assert np.all(state.potential[~edge_mask(state.grid)] == 0)


def test_brush_keeps_walls_and_clips(state):
    state.apply_brush(0, 0, radius=6, strength=1e6)

    assert np.all(state.potential[edge_mask(state.grid)] == state.params.barrier_energy)
    assert state.potential[1, 1] <= state.params.barrier_energy
    assert state.potential[1, 1] > 0


def test_clear_potential(state):
    state.apply_brush(32, 32, 8)
    state.clear_potential()

    mask = edge_mask(state.grid)
    assert np.all(state.potential[~mask] == 0)
    assert np.all(state.potential[mask] == state.params.barrier_energy)


#######################################
#       Wave function mutations       #
#######################################

def test_shift_wrap(state):
    before = state.psi.copy()
    state.shift_wave_function(50, -3, policy='wrap')
    npt.assert_array_equal(state.psi, np.roll(before, (-3, 50), axis=(0, 1)))


def test_shift_drop(state):
    before = state.psi.copy()
    state.shift_wave_function(5, 2, policy=ShiftPolicy.DROP)

    npt.assert_array_equal(state.psi[2:, 5:], before[:-2, :-5])
    assert np.all(state.psi[:2, :] == 0)
    assert np.all(state.psi[:, :5] == 0)


def test_shift_drop_renormalize(state):
    state.shift_wave_function(40, 0, renormalize=True)
    assert abs(state.norm() - 1.0) < 1e-9


def test_shift_reflect(state):
    state.psi[...] = 0
    state.psi[10, 63] = 1.0
    state.psi[3, 1] = 2.0j

    state.shift_wave_function(1, -3, policy=ShiftPolicy.REFLECT)

    expected = np.zeros_like(state.psi)
    expected[7, 63] = 1.0
    expected[0, 2] = 2.0j
    npt.assert_array_equal(state.psi, expected)


def test_shift_reflect_folds_past_top_edge(state):
    state.psi[...] = 0
    state.psi[1, 20] = 1.0
    state.psi[0, 30] = 0.5

    state.shift_wave_function(0, -3, policy=ShiftPolicy.REFLECT)

    expected = np.zeros_like(state.psi)
    # Row 1 lands on -2, folding back to row 1. Row 0 lands on -3, folding to row 2
    expected[1, 20] = 1.0
    expected[2, 30] = 0.5
    npt.assert_array_equal(state.psi, expected)


def test_momentum_kick(state):
    before = np.abs(state.psi)
    state.apply_momentum_kick(0.5, -0.25)

    npt.assert_allclose(np.abs(state.psi), before)
    assert state.params.px == 1.5
    assert state.params.py == -0.25

    observables = measure(state)
    npt.assert_allclose(observables['px'], 1.5, atol=1e-6)
    npt.assert_allclose(observables['py'], -0.25, atol=1e-6)


def test_renormalize(state):
    state.psi *= 0.5
    prob = state.renormalize()
    npt.assert_allclose(prob, 0.25)
    assert abs(state.norm() - 1.0) < 1e-9
