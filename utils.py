# -*- coding: utf-8 -*-
"""
Plotting utilities for the example scripts
"""

from typing import Optional

import numpy as np
from numpy.typing import ArrayLike
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.colors import hsv_to_rgb

from wavepacket2d import ComputationEngine, SimulationState


def complex_to_rgb(c: ArrayLike, brightness: float = 1, absmax: Optional[float] = None):
    """
    Converts an array of complex number to RGB, representing the number's
    norm using the color's intensity, and its phase using the color's hue.

    Parameters
    ----------
    c : ArrayLike of complex
        complex value of each point.
    brightness : float, optional
        Intensity multiplier, clipped to full intensity. The default is 1.
    absmax : float, optional
        Norm mapped to full intensity. If None, the maximal norm in c is used.
        The default is None.

    Returns
    -------
    rgb : ArrayLike of float of shape (c.shape, 3)
        RGB values for each point in c.
    """
    c = np.array(c)
    mask = (~np.isnan(c)) & ~(np.isinf(c))
    c[~mask] = 0
    abs_c, angle_c = np.abs(c), np.angle(c)
    if absmax is None:
        absmax = np.max(abs_c)
    value = np.clip(abs_c / (absmax + 1e-30) * brightness, 0, 1)

    return hsv_to_rgb(np.stack((angle_c / 2 / np.pi + 0.5,
                                np.ones_like(abs_c),
                                value), axis=-1))


def animate_state(state: SimulationState, engine: ComputationEngine,
                  steps_per_frame: int = 10, n_frames: int = 500,
                  interval: float = 20):
    """
    Animates a state as it is propagated. The wave function is drawn with
    complex_to_rgb(), using the state's brightness parameter, and the potential
    is overlaid in gray.

    Parameters
    ----------
    state : SimulationState
        State to propagate. Modified while the animation runs.
    engine : ComputationEngine
        Engine for the state's grid.
    steps_per_frame : int, optional
        Steps taken between consecutive frames. The default is 10.
    n_frames : int, optional
        Number of frames. The default is 500.
    interval : float, optional
        Time interval between consecutive images, in milliseconds.
        The default is 20.

    Returns
    -------
    ani: FuncAnimation
        Animation object. Needs to be saved until animation is over.
    """
    fig, ax = plt.subplots()
    absmax = np.max(np.abs(state.psi))
    extent = (0, state.domain_size, 0, state.domain_size)

    img = ax.imshow(complex_to_rgb(state.psi, state.params.brightness, absmax),
                    origin='lower', extent=extent)
    vmax = max(np.max(state.potential), 1)
    ax.imshow(np.ma.masked_equal(state.potential, 0), origin='lower', extent=extent,
              cmap='gray', alpha=0.5, vmin=0, vmax=vmax)
    title = ax.set_title('')

    def update(frame):
        for _ in range(steps_per_frame):
            engine.step(state)
        img.set_data(complex_to_rgb(state.psi, state.params.brightness, absmax))
        title.set_text(f'step {(frame + 1) * steps_per_frame}, norm {state.norm():.4f}')
        return img, title

    ani = FuncAnimation(fig, update, frames=n_frames, interval=interval,
                        blit=False, repeat=False)

    return ani
