# -*- coding: utf-8 -*-
"""
Well known experiments as potential presets.

Each preset draws its barriers into a potential array and carries a set of
wave packet parameters suited to it. Presets are applied to a state with
apply_preset(), which clears the potential first, keeping the boundary wall.
"""

from typing import Callable, Dict, NamedTuple

import numpy as np


class Preset(NamedTuple):
    description: str
    draw: Callable[[np.ndarray, int, int], None]
    params: Dict[str, float]


def draw_double_slit(potential: np.ndarray, width: int, height: int,
                     energy: float = 200.0, thickness: int = 4,
                     slit_height: int = 12, slit_gap: int = 20):
    """
    Draws a vertical wall in the middle of the grid with two slits, placed
    symmetrically around the vertical center.

    Parameters
    ----------
    potential : ndarray of float of shape (height, width)
        Potential to draw into. Modified in place.
    width, height : int
        Grid extents.
    energy : float, optional
        Wall potential energy. The default is 200.
    thickness : int, optional
        Wall thickness, in cells. The default is 4.
    slit_height : int, optional
        Opening of each slit, in cells. The default is 12.
    slit_gap : int, optional
        Distance between the slit centers, in cells. The default is 20.
    """
    x_start = width // 2 - thickness // 2
    rows = np.arange(height)
    in_slit = np.zeros(height, dtype=bool)
    for center in (height // 2 - slit_gap // 2, height // 2 + slit_gap // 2):
        in_slit |= (rows >= center - slit_height / 2) & (rows < center + slit_height / 2)

    potential[~in_slit, x_start:x_start + thickness] = energy


def draw_tunneling_barrier(potential: np.ndarray, width: int, height: int,
                           energy: float = 3.5, thickness: int = 3):
    """
    Draws a full-height vertical barrier in the middle of the grid.
    """
    x_start = width // 2 - thickness // 2
    potential[:, x_start:x_start + thickness] = energy


PRESETS = {
    'DOUBLE_SLIT': Preset(
        description='demonstrates wave-particle duality and interference.',
        draw=draw_double_slit,
        params={'px': 2.0, 'py': 0.0, 'sigma': 10.0, 'x0': 32.0, 'y0': 128.0}),
    'TUNNELING': Preset(
        description='shows quantum tunneling through a potential barrier.',
        draw=draw_tunneling_barrier,
        params={'px': 2.5, 'py': 0.0, 'sigma': 15.0, 'x0': 64.0, 'y0': 128.0}),
}


def apply_preset(state, name: str):
    """
    Applies a preset to a simulation state: clears the potential, draws the
    preset's barriers, sets its wave packet parameters and resets the wave
    function.

    Wave packet positions are given for the default 256x256 domain, and are
    scaled to the state's domain size.

    Parameters
    ----------
    state : SimulationState
        The state to apply the preset to.
    name : str
        Preset name, a key of PRESETS.

    Raises
    ------
    KeyError
        If no preset with the given name exists.

    Returns
    -------
    events : list of NyquistClamp
        Momentum clamps performed while resetting the wave function.
    """
    if name not in PRESETS:
        raise KeyError(f'Unknown preset: {name}')
    preset = PRESETS[name]

    state.potential.fill(0)
    preset.draw(state.potential, state.grid.width, state.grid.height)
    state.update_boundaries()

    scale = state.domain_size / 256.0
    for key, value in preset.params.items():
        if key in ('x0', 'y0', 'sigma'):
            value *= scale
        setattr(state.params, key, value)

    return state.reset_wave_function()
