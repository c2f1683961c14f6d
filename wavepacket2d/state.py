# -*- coding: utf-8 -*-
"""
Simulation state: the wave function, the potential and the kinetic operator
on a grid, together with the parameter record controlling them.

The state exclusively owns its arrays. They are exposed for reading (e.g. by
a renderer) and for the mutations an interactive front end performs between
steps: painting the potential with a brush, applying presets, shifting or
kicking the wave packet, switching the boundary mode and resizing the grid.
Time evolution itself is done by ComputationEngine, which receives the state
explicitly on every step.
"""

from typing import List, Optional

import numpy as np

from . import operators
from .config import BoundaryMode, ShiftPolicy, SimulationParams
from .operators import NyquistClamp
from .utils import (GridSize, HBAR, MASS, GRID_SIZE, DOMAIN_SIZE, BRUSH_ENERGY,
                    edge_mask, validate_grid)


def _reflect_indices(idx: np.ndarray, n: int) -> np.ndarray:
    """Folds indices outside [0, n) back into it, mirroring at the edges"""
    m = np.mod(idx, 2 * n)
    return np.where(m < n, m, 2 * n - 1 - m)


def _shift_axis(psi: np.ndarray, shift: int, axis: int,
                policy: ShiftPolicy) -> np.ndarray:
    if shift == 0:
        return psi
    if policy is ShiftPolicy.WRAP:
        return np.roll(psi, shift, axis=axis)

    n = psi.shape[axis]
    dest = np.arange(n) + shift
    out = np.zeros_like(psi)
    src = np.moveaxis(psi, axis, 0)
    dst = np.moveaxis(out, axis, 0)

    if policy is ShiftPolicy.REFLECT:
        np.add.at(dst, _reflect_indices(dest, n), src)
    else:
        keep = (dest >= 0) & (dest < n)
        dst[dest[keep]] = src[keep]

    return out


class SimulationState:
    """
    Mutable simulation state.

    Parameters
    ----------
    grid : GridSize or tuple of 2 ints, optional
        Grid extents as (width, height). The default is GRID_SIZE x GRID_SIZE.
    domain_size : float, optional
        Physical side length of the simulation domain. The default is
        DOMAIN_SIZE.
    mass : float, optional
        Particle mass. The default is MASS.
    hbar : float, optional
        Reduced Planck constant. The default is HBAR.
    params : SimulationParams, optional
        Parameter record. A record with default values is created if None.

    Attributes
    ----------
    psi : ndarray of complex of shape (height, width)
        The wave function.
    potential : ndarray of float of shape (height, width)
        The potential energy at each cell.
    kinetic_operator : ndarray of float of shape (height, width)
        Kinetic energy at each momentum-space cell.
    last_clamp_events : list of NyquistClamp
        Momentum clamps performed by the last reset of the wave function.
    """

    def __init__(self, grid=None, domain_size: float = DOMAIN_SIZE,
                 mass: float = MASS, hbar: float = HBAR,
                 params: Optional[SimulationParams] = None):
        self.mass = mass
        self.hbar = hbar
        self.domain_size = float(domain_size)
        self.params = params if params is not None else SimulationParams()
        self.last_clamp_events = []

        self.set_grid(grid if grid is not None else GridSize(GRID_SIZE, GRID_SIZE))

    def __repr__(self):
        return (f'SimulationState(grid={self.grid.width}x{self.grid.height}, '
                f'domain_size={self.domain_size}, params={self.params!r})')

    @property
    def dx(self) -> float:
        return self.domain_size / self.grid.width

    @property
    def dy(self) -> float:
        return self.domain_size / self.grid.height

    def coordinates(self):
        """
        Physical coordinates of the grid cells.

        Returns
        -------
        x : ndarray of float of shape (1, width)
        y : ndarray of float of shape (height, 1)
        """
        x = np.arange(self.grid.width) * self.dx
        y = np.arange(self.grid.height) * self.dy
        return x[np.newaxis, :], y[:, np.newaxis]

    def set_grid(self, grid, domain_size: Optional[float] = None):
        """
        Resizes the grid and/or the physical domain. Reallocates all arrays,
        and recomputes the kinetic operator, the boundary potential and the
        wave function. Any painted potential is lost.

        An engine built for the previous grid will reject the new state.

        Parameters
        ----------
        grid : GridSize or tuple of 2 ints
            New grid extents.
        domain_size : float, optional
            New physical domain size. If None, the current one is kept.
        """
        self.grid = validate_grid(grid)
        if domain_size is not None:
            self.domain_size = float(domain_size)

        self.psi = np.zeros(self.grid.shape, dtype=complex)
        self.potential = np.zeros(self.grid.shape)
        self.kinetic_operator = np.zeros(self.grid.shape)

        self.update_boundaries()
        self.precompute_kinetic_operator()
        self.reset_wave_function()

    def precompute_kinetic_operator(self):
        """
        Recalculates the momentum-space kinetic operator from the current grid,
        domain size, mass and hbar.
        """
        self.kinetic_operator = operators.kinetic_operator(self.grid, self.domain_size,
                                                           self.mass, self.hbar)

    def reset_wave_function(self) -> List[NyquistClamp]:
        """
        Reinitializes the wave function as a normalized Gaussian wave packet
        using the current parameters.

        The momentum in the parameter record is clamped to the Nyquist limit of
        the grid first, and stays clamped.

        Returns
        -------
        events : list of NyquistClamp
            The clamps performed, also kept in last_clamp_events.

        Raises
        ------
        ValueError
            If sigma is not positive. The wave function is left untouched.
        """
        params = self.params
        params.px, params.py, events = operators.clamp_momentum(
            params.px, params.py, self.dx, self.dy, self.hbar)
        self.last_clamp_events = events

        self.psi[...] = operators.gaussian_packet(self.grid, self.dx, self.dy,
                                                  params.x0, params.y0,
                                                  params.px, params.py,
                                                  params.sigma, self.hbar)
        operators.normalize(self.psi, self.dx, self.dy)
        return events

    def norm(self) -> float:
        """Total probability sum(|psi|^2) dx dy"""
        return operators.probability(self.psi, self.dx, self.dy)

    def renormalize(self) -> float:
        """
        Renormalizes the wave function to unit probability.

        Returns
        -------
        prob : float
            Total probability before renormalization.
        """
        return operators.normalize(self.psi, self.dx, self.dy)

    #######################################
    #          Boundary potential         #
    #######################################

    def update_boundaries(self):
        """
        Clears the edge cells of the potential and raises the reflective wall
        on them if the boundary mode asks for it. Idempotent.
        """
        mask = edge_mask(self.grid)
        self.potential[mask] = 0
        if self.params.boundary_mode.reflective:
            self.potential[mask] = self.params.barrier_energy
        self._wall_mode = self.params.boundary_mode

    def sync_boundaries(self):
        """
        Refreshes the boundary potential if the boundary mode in the parameter
        record was changed since the wall was last built.
        """
        if self.params.boundary_mode is not self._wall_mode:
            self.update_boundaries()

    def set_boundary_mode(self, mode):
        """
        Switches the boundary mode and refreshes the boundary potential.

        Parameters
        ----------
        mode : BoundaryMode or str
            New boundary mode.
        """
        self.params.boundary_mode = BoundaryMode(mode)
        self.update_boundaries()

    def clear_potential(self):
        """Removes all painted potential, keeping the boundary wall"""
        self.potential.fill(0)
        self.update_boundaries()

    def apply_brush(self, cx: int, cy: int, radius: float,
                    strength: float = BRUSH_ENERGY, erase: bool = False):
        """
        Paints the potential with a circular brush with linear falloff.

        Cells within radius of (cx, cy) are set to strength * (1 - r/radius).
        Edge cells are never touched, so the boundary wall survives.

        Parameters
        ----------
        cx, cy : int
            Brush center, in cells.
        radius : float
            Brush radius, in cells.
        strength : float, optional
            Potential energy at the center of the brush. Clipped to
            [0, barrier_energy]. The default is BRUSH_ENERGY.
        erase : bool, optional
            Whether to erase instead, setting the brushed cells to 0.
            The default is False.
        """
        if radius <= 0:
            return

        strength = 0.0 if erase else float(np.clip(strength, 0,
                                                   self.params.barrier_energy))
        rows = np.arange(self.grid.height)[:, np.newaxis]
        cols = np.arange(self.grid.width)[np.newaxis, :]
        dist = np.hypot(cols - cx, rows - cy)

        mask = (dist <= radius) & ~edge_mask(self.grid)
        self.potential[mask] = strength * (1.0 - dist[mask] / radius)

    #######################################
    #       Wave function mutations       #
    #######################################

    def shift_wave_function(self, dx: int, dy: int,
                            policy: ShiftPolicy = ShiftPolicy.DROP,
                            renormalize: bool = False):
        """
        Shifts the wave function by a whole number of cells.

        Parameters
        ----------
        dx, dy : int
            Shift along x (columns) and y (rows), in cells.
        policy : ShiftPolicy or str, optional
            What happens to amplitude shifted past an edge. The default is
            ShiftPolicy.DROP.
        renormalize : bool, optional
            Whether to renormalize the wave function afterwards, e.g. to restore
            probability dropped at the edges. The default is False.
        """
        policy = ShiftPolicy(policy)
        psi = _shift_axis(self.psi, int(dx), 1, policy)
        psi = _shift_axis(psi, int(dy), 0, policy)
        self.psi[...] = psi

        if renormalize:
            self.renormalize()

    def apply_momentum_kick(self, dpx: float, dpy: float):
        """
        Adds momentum to the wave function without resetting it, by multiplying
        it with the plane wave exp(i(dpx*x + dpy*y)/hbar). The kick is added to
        the momentum in the parameter record as well.
        """
        x, y = self.coordinates()
        self.psi *= np.exp(1j * (dpx * x + dpy * y) / self.hbar)
        self.params.px += dpx
        self.params.py += dpy
