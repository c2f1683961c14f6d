# -*- coding: utf-8 -*-
"""
Time evolution of a SimulationState using the split-step Fourier method.

A single step follows Strang splitting,

.. math::
    \\psi(t + dt) = e^{-iV dt/2\\hbar} \\mathcal{F}^{-1} e^{-iT(k) dt/\\hbar}
                    \\mathcal{F} e^{-iV dt/2\\hbar} \\psi(t)

which is second order accurate and time reversible. When the boundary mode is
absorbing, the wave function is additionally damped in a band near the grid
edges, strictly after the splitting is done.

The engine keeps no state across steps other than its transform scratch
buffers. It is sized to one grid on construction, and rejects states of any
other grid. Because of the scratch buffers, an engine must not be shared
between threads.
"""

import logging

import numpy as np

from .errors import SizeMismatchError
from .fft import FFT2D
from .operators import wave_numbers
from .utils import (ABSORBING_BAND_FRACTION, ABSORBING_BAND_MIN,
                    ABSORPTION_STRENGTH, edge_distance, validate_grid)


class ComputationEngine:
    """
    Split-step Fourier propagator for a fixed grid.

    Parameters
    ----------
    grid : GridSize or tuple of 2 ints
        Grid extents, as (width, height).

    Raises
    ------
    InvalidGridError
        If the grid is missing, or its extents are not positive integers.
    """

    def __init__(self, grid):
        self.grid = validate_grid(grid)
        self.fft = FFT2D(self.grid.width, self.grid.height)

        # k-space work buffer
        self._buffer = np.zeros(self.grid.shape, dtype=complex)

        # Absorbing band depth, zero outside the band
        band = max(ABSORBING_BAND_MIN,
                   int(ABSORBING_BAND_FRACTION * min(self.grid.width, self.grid.height)))
        self.band_width = band
        self._band_depth = np.clip(band - edge_distance(self.grid), 0, None)
        self._band_mask = self._band_depth > 0

        logging.getLogger('wavepacket2d.engine').debug(
            'Engine created for a %dx%d grid, absorbing band of %d cells',
            self.grid.width, self.grid.height, band)

    def _check_state(self, state):
        if state.psi.shape != self.grid.shape:
            raise SizeMismatchError(f'Wave function has shape {state.psi.shape}, '
                                    f'engine is configured for {self.grid.shape}')
        if state.potential.shape != self.grid.shape:
            raise SizeMismatchError(f'Potential has shape {state.potential.shape}, '
                                    f'engine is configured for {self.grid.shape}')

    def _check_kinetic_operator(self, state):
        if state.kinetic_operator.shape != self.grid.shape:
            raise SizeMismatchError(f'Kinetic operator has shape '
                                    f'{state.kinetic_operator.shape}, engine is '
                                    f'configured for {self.grid.shape}')

    def step(self, state):
        """
        Advances the state by one time step of params.dt: half potential,
        full kinetic, half potential, then absorbing boundary damping.

        Shape mismatches are detected before any sub-step, leaving state.psi
        untouched. If the boundary mode in the parameter record changed since
        the last step, the state refreshes its boundary wall first.

        Parameters
        ----------
        state : SimulationState
            The state to advance. Modified in place.
        """
        self._check_state(state)
        self._check_kinetic_operator(state)
        state.sync_boundaries()

        self.apply_potential_half_step(state)
        self.apply_kinetic_step(state)
        self.apply_potential_half_step(state)

        # Only after the full splitting, to keep it time reversible
        self.apply_absorbing_boundary(state)

    def apply_potential_half_step(self, state):
        """
        Rotates the phase of the wave function by -V dt / (2 hbar) at each cell.
        Cells with zero potential are skipped.
        """
        self._check_state(state)

        mask = state.potential != 0
        phase = -state.potential[mask] * state.params.dt / (2 * state.hbar)
        state.psi[mask] *= np.exp(1j * phase)

    def apply_kinetic_step(self, state):
        """
        Transforms the wave function to momentum space, rotates its phase by
        -T(k) dt / hbar at each cell, and transforms it back.

        Raises
        ------
        SizeMismatchError
            If the kinetic operator or the wave function do not match the grid
            the engine was built for.
        """
        self._check_state(state)
        self._check_kinetic_operator(state)

        self.fft.forward(state.psi, out=self._buffer)
        self._buffer *= np.exp(-1j * state.kinetic_operator * state.params.dt / state.hbar)
        self.fft.inverse(self._buffer, out=state.psi)

    def absorption_rate(self, state) -> np.ndarray:
        """
        Continuous absorption rate at each cell, increasing linearly with the
        depth into the absorbing band and zero outside of it.

        Returns
        -------
        rate : ndarray of float of shape (height, width)
            Absorption rate, in inverse time units.
        """
        cell_size = min(state.dx, state.dy)
        return ABSORPTION_STRENGTH * self._band_depth * cell_size

    def apply_absorbing_boundary(self, state):
        """
        Damps the wave function in the absorbing band by exp(-rate * |dt|).
        Does nothing unless the boundary mode is absorbing.

        Since the damping is a rate over time, running it for the same total
        time gives the same decay regardless of the time step.
        """
        if not state.params.boundary_mode.absorbing:
            return
        self._check_state(state)

        rate = self.absorption_rate(state)[self._band_mask]
        state.psi[self._band_mask] *= np.exp(-rate * abs(state.params.dt))

    def shift_subpixel(self, state, dx: float, dy: float):
        """
        Translates the wave function by an arbitrary physical distance, using a
        phase ramp in momentum space. The translation is periodic.

        Parameters
        ----------
        state : SimulationState
            The state to modify.
        dx, dy : float
            Translation along x and y, in physical units.
        """
        self._check_state(state)
        kx, ky = wave_numbers(self.grid, state.dx, state.dy)

        self.fft.forward(state.psi, out=self._buffer)
        self._buffer *= np.exp(-1j * (kx * dx + ky * dy))
        self.fft.inverse(self._buffer, out=state.psi)
