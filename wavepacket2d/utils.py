# -*- coding: utf-8 -*-
"""
Physical constants, default simulation values and small grid utilities.
"""

import logging
from typing import NamedTuple

import numpy as np

from .errors import InvalidGridError

# System params
HBAR = 1
MASS = 1

# Grid
GRID_SIZE = 256
DOMAIN_SIZE = 256.0

# Initial wave packet
INITIAL_X0 = 64.0
INITIAL_Y0 = 128.0
INITIAL_P_X = 2.0
INITIAL_P_Y = 0.0
INITIAL_SIGMA = 15.0
INITIAL_DT = 0.005

# Energies
WALL_ENERGY = 300.0
BRUSH_ENERGY = 100.0

# Momentum is clamped to this fraction of the Nyquist limit
NYQUIST_MARGIN = 0.9

# Absorbing boundary band
ABSORBING_BAND_FRACTION = 0.05
ABSORBING_BAND_MIN = 4
ABSORPTION_STRENGTH = 0.06


class GridSize(NamedTuple):
    """Grid extents, in cells"""
    width: int
    height: int

    @property
    def shape(self):
        """Shape of a row-major array on this grid, as (height, width)"""
        return (self.height, self.width)

    @property
    def size(self):
        return self.width * self.height


def is_power_of_two(n) -> bool:
    """
    Checks whether n is a positive integral power of two (1 included)
    """
    return n > 0 and (n & (n - 1)) == 0


def is_integer(n) -> bool:
    """
    Checks whether n is an integer, or a float with an integral value.
    Booleans are rejected.
    """
    if isinstance(n, (bool, np.bool_)):
        return False
    if isinstance(n, (int, np.integer)):
        return True
    return isinstance(n, (float, np.floating)) and float(n).is_integer()


def validate_grid(grid) -> GridSize:
    """
    Validates grid extents, returning them as GridSize.

    Extents which are not powers of 2 are accepted, with a logged warning, as
    only the transform itself requires them.

    Parameters
    ----------
    grid : GridSize, tuple of 2 ints, or any object with width and height
        Grid extents to validate.

    Raises
    ------
    InvalidGridError
        If the grid is missing, or its extents are not positive integers.

    Returns
    -------
    grid : GridSize
        The validated extents.
    """
    if grid is None:
        raise InvalidGridError('Invalid grid dimensions: grid is missing')
    try:
        width, height = grid.width, grid.height
    except AttributeError:
        try:
            width, height = grid
        except (TypeError, ValueError) as E:
            raise InvalidGridError(f'Invalid grid dimensions: {grid!r} must have '
                                   'numeric width and height') from E

    if not is_integer(width) or not is_integer(height):
        raise InvalidGridError(f'Invalid grid dimensions: width={width!r}, '
                               f'height={height!r} - must be integers')
    width, height = int(width), int(height)
    if width <= 0 or height <= 0:
        raise InvalidGridError(f'Invalid grid dimensions: width={width}, '
                               f'height={height} - must be positive')

    if not is_power_of_two(width) or not is_power_of_two(height):
        logging.getLogger('wavepacket2d.grid').warning(
            'Grid dimensions %dx%d are not powers of 2. The transform will reject them',
            width, height)

    return GridSize(int(width), int(height))


def edge_mask(grid: GridSize) -> np.ndarray:
    """
    Boolean mask of the outermost ring of cells of a grid.

    Parameters
    ----------
    grid : GridSize
        Grid to build the mask for.

    Returns
    -------
    mask : ndarray of bool of shape (height, width)
        True on edge cells.
    """
    mask = np.zeros(grid.shape, dtype=bool)
    mask[0, :] = mask[-1, :] = True
    mask[:, 0] = mask[:, -1] = True
    return mask


def edge_distance(grid: GridSize) -> np.ndarray:
    """
    Distance in cells of every cell from the nearest grid edge.

    Parameters
    ----------
    grid : GridSize
        Grid to compute distances for.

    Returns
    -------
    dist : ndarray of int of shape (height, width)
        Minimal distance of each cell from any of the four edges. Edge cells
        have distance 0.
    """
    rows = np.arange(grid.height)
    cols = np.arange(grid.width)
    dist_y = np.minimum(rows, grid.height - 1 - rows)
    dist_x = np.minimum(cols, grid.width - 1 - cols)
    return np.minimum.outer(dist_y, dist_x)
