# -*- coding: utf-8 -*-
"""
Precomputation of the split-step operators and of the initial wave packet.

All grids here are row-major arrays of shape (height, width), where row j
corresponds to y = j*dy and column i corresponds to x = i*dx. Momentum-space
grids use the standard FFT frequency ordering, in which index i in [0, N/2)
holds frequency i*dk and index i in [N/2, N) holds frequency (i-N)*dk, with
dk = 2*pi / (N*d).
"""

import logging
from typing import List, NamedTuple, Tuple

import numpy as np
from scipy.fft import fftfreq

from .utils import GridSize, NYQUIST_MARGIN


class NyquistClamp(NamedTuple):
    """Record of a momentum component clamped to the Nyquist limit"""
    axis: str
    requested: float
    clamped: float
    limit: float


def wave_numbers(grid: GridSize, dx: float, dy: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Angular wave numbers of the momentum-space grid.

    Parameters
    ----------
    grid : GridSize
        Grid extents.
    dx : float
        Physical spacing between columns.
    dy : float
        Physical spacing between rows.

    Returns
    -------
    kx : ndarray of float of shape (1, width)
        Wave number of each column.
    ky : ndarray of float of shape (height, 1)
        Wave number of each row.
    """
    kx = fftfreq(grid.width, d=dx) * 2 * np.pi
    ky = fftfreq(grid.height, d=dy) * 2 * np.pi
    return kx[np.newaxis, :], ky[:, np.newaxis]


def kinetic_operator(grid: GridSize, domain_size: float, mass: float,
                     hbar: float) -> np.ndarray:
    """
    Calculates the kinetic energy at each momentum-space grid cell,

    .. math::
        T(k) = \\frac{\\hbar^2}{2m} (k_x^2 + k_y^2)

    Parameters
    ----------
    grid : GridSize
        Grid extents.
    domain_size : float
        Physical side length of the (square) simulation domain.
    mass : float
        Particle mass.
    hbar : float
        Reduced Planck constant.

    Returns
    -------
    T : ndarray of float of shape (height, width)
        Kinetic energy per cell. Non-negative and symmetric under k -> -k.
    """
    dx = domain_size / grid.width
    dy = domain_size / grid.height
    kx, ky = wave_numbers(grid, dx, dy)

    return hbar ** 2 / (2 * mass) * (kx ** 2 + ky ** 2)


def nyquist_momentum(d: float, hbar: float) -> float:
    """Maximal momentum representable on a grid with spacing d"""
    return np.pi / d * hbar


def clamp_momentum(px: float, py: float, dx: float, dy: float, hbar: float,
                   margin: float = NYQUIST_MARGIN) -> Tuple[float, float,
                                                            List[NyquistClamp]]:
    """
    Clamps the momentum components to a fraction of the Nyquist limit of the
    grid, avoiding aliasing of the initial wave packet.

    Clamping is not an error. Every clamped component is reported as a
    warning on the 'wavepacket2d.operators' logger and returned as an event.

    Parameters
    ----------
    px, py : float
        Requested momentum components.
    dx, dy : float
        Physical grid spacing along each axis.
    hbar : float
        Reduced Planck constant.
    margin : float, optional
        Fraction of the Nyquist limit allowed. The default is 0.9.

    Returns
    -------
    px, py : float
        The momentum components after clamping.
    events : list of NyquistClamp
        One event per clamped component. Empty if nothing was clamped.
    """
    logger = logging.getLogger('wavepacket2d.operators')
    events = []
    clamped = []

    for axis, p, d in (('px', px, dx), ('py', py, dy)):
        limit = nyquist_momentum(d, hbar) * margin
        if abs(p) > limit:
            new_p = float(np.sign(p) * limit)
            logger.warning('Nyquist limit: clamped %s from %g to %g', axis, p, new_p)
            events.append(NyquistClamp(axis, p, new_p, limit))
            p = new_p
        clamped.append(p)

    return clamped[0], clamped[1], events


def gaussian_packet(grid: GridSize, dx: float, dy: float, x0: float, y0: float,
                    px: float, py: float, sigma: float, hbar: float) -> np.ndarray:
    """
    Samples an unnormalized Gaussian wave packet on the grid,

    .. math::
        \\psi(x,y) = e^{-((x-x_0)^2 + (y-y_0)^2) / 2\\sigma^2}
                     e^{i(p_x x + p_y y)/\\hbar}

    at x = i*dx, y = j*dy.

    Raises
    ------
    ValueError
        If sigma is not positive.

    Returns
    -------
    psi : ndarray of complex of shape (height, width)
        The sampled wave packet.
    """
    if not sigma > 0:
        raise ValueError(f'Wave packet width must be positive, got sigma={sigma}')

    x =(np.arange(grid.width) * dx)[np.newaxis, :]
    y = (np.arange(grid.height) * dy)[:, np.newaxis]

    envelope = np.exp(-((x - x0) ** 2 + (y - y0) ** 2) / (2 * sigma ** 2))
    phase = (px * x + py * y) / hbar

    return envelope * np.exp(1j * phase)


def probability(psi: np.ndarray, dx: float, dy: float) -> float:
    """Total probability sum(|psi|^2) dx dy"""
    return float(np.sum(np.abs(psi) ** 2) * dx * dy)


def normalize(psi: np.ndarray, dx: float, dy: float) -> float:
    """
    Normalizes a wave function in place so that sum(|psi|^2) dx dy = 1.

    A numerically vanishing wave function is left untouched, and a warning is
    logged, instead of producing NaNs.

    Parameters
    ----------
    psi : ndarray of complex
        Wave function to normalize. Modified in place.
    dx, dy : float
        Physical grid spacing.

    Returns
    -------
    prob : float
        The total probability before normalization.
    """
    prob = probability(psi, dx, dy)
    if not prob > np.finfo(float).tiny:
        logging.getLogger('wavepacket2d.operators').warning(
            'Wave function norm is %g. Skipping normalization', prob)
        return prob

    psi /= np.sqrt(prob)
    return prob
