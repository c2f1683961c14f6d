# -*- coding: utf-8 -*-
"""
Radix-2 Cooley-Tukey discrete Fourier transform.

The transforms work in place on separate real and imaginary float arrays. A
1D sequence is transformed over the last axis of the arrays, so any leading
axes are treated as a batch of independent sequences of the same length. This
is used by FFT2D to transform all the rows of a grid together.

The forward transform follows the usual sign convention,

.. math::
    X_k = \\sum_{n=0}^{N-1} x_n e^{-2\\pi i k n / N}

and the inverse divides by N, so that inverse_transform(transform(x)) == x up
to rounding.

Only power-of-two lengths are supported. Lengths 0 and 1 are no-ops.
"""

from functools import lru_cache
from typing import List, Tuple

import numpy as np

from .errors import InvalidSizeError, SizeMismatchError
from .utils import is_power_of_two


@lru_cache(maxsize=None)
def _bit_reversal(n: int) -> np.ndarray:
    """
    Permutation taking each index in [0, n) to its log2(n)-bit reversal.
    """
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=np.intp)
    for _ in range(bits):
        rev = (rev << 1) | (idx & 1)
        idx = idx >> 1

    rev.setflags(write=False)
    return rev


@lru_cache(maxsize=None)
def _butterfly_stages(n: int) -> List[Tuple[np.ndarray, np.ndarray,
                                             np.ndarray, np.ndarray]]:
    """
    Index pairs and twiddle factors of every butterfly stage for length n.

    Returns
    -------
    stages : list of tuples (u, v, w_re, w_im)
        For stage size len = 2, 4, ..., n: the indices of the upper and lower
        element of each butterfly, and the twiddle factor cos/sin(-2 pi j / len)
        applied to the lower element.
    """
    stages = []
    size = 2
    while size <= n:
        half = size // 2
        j = np.arange(half)
        u = (np.arange(0, n, size)[:, np.newaxis] + j).ravel()
        angle = np.tile(-2 * np.pi * j / size, n // size)
        stage = (u, u + half, np.cos(angle), np.sin(angle))
        for arr in stage:
            arr.setflags(write=False)
        stages.append(stage)
        size *= 2

    return stages


def _check_buffers(real: np.ndarray, imag: np.ndarray) -> int:
    if real.shape != imag.shape:
        raise SizeMismatchError(f'Real and imaginary buffers differ in shape: '
                                f'{real.shape} != {imag.shape}')
    if real.ndim == 0:
        raise SizeMismatchError('Transform buffers must have at least one axis')

    n = real.shape[-1]
    if n > 1 and not is_power_of_two(n):
        raise InvalidSizeError(f'Transform size must be a power of 2, got {n}. '
                               'Valid sizes: 1, 2, 4, 8, ..., 256, 512, 1024, etc.')
    return n


def transform(real: np.ndarray, imag: np.ndarray):
    """
    In-place forward transform over the last axis.

    Parameters
    ----------
    real : ndarray of float
        Real components. Modified in place.
    imag : ndarray of float
        Imaginary components, of the same shape as real. Modified in place.

    Raises
    ------
    InvalidSizeError
        If the length of the last axis is not a power of 2.
    SizeMismatchError
        If real and imag differ in shape.
    """
    n = _check_buffers(real, imag)
    if n <= 1:
        return

    rev = _bit_reversal(n)
    real[...] = real[..., rev]
    imag[...] = imag[..., rev]

    for u, v, w_re, w_im in _butterfly_stages(n):
        u_re, u_im = real[..., u], imag[..., u]
        v_re, v_im = real[..., v], imag[..., v]

        t_re = v_re * w_re - v_im * w_im
        t_im = v_re * w_im + v_im * w_re

        real[..., v] = u_re - t_re
        imag[..., v] = u_im - t_im
        real[..., u] = u_re + t_re
        imag[..., u] = u_im + t_im


def inverse_transform(real: np.ndarray, imag: np.ndarray):
    """
    In-place inverse transform over the last axis, normalized by 1/N.

    Computed by conjugating, running the forward transform, and conjugating
    back. Parameters and errors are as in transform().
    """
    n = _check_buffers(real, imag)
    if n == 0:
        return

    np.negative(imag, out=imag)
    transform(real, imag)
    real /= n
    imag /= -n


class FFT2D:
    """
    Two dimensional transform of a row-major complex grid, by row/column
    decomposition of the 1D transform.

    Rows are transformed using the grid's width, then the grid is transposed
    into a scratch buffer so that columns are contiguous, and the columns are
    transformed using the grid's height. All scratch buffers are allocated
    once, on construction.

    The object holds mutable scratch state and should not be shared between
    threads.

    Parameters
    ----------
    width : int
        Number of columns in the grid.
    height : int
        Number of rows in the grid.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

        # Row-major scratch, shape (height, width)
        self._re = np.zeros((height, width))
        self._im = np.zeros((height, width))

        # Transposed scratch, shape (width, height)
        self._re_t = np.zeros((width, height))
        self._im_t = np.zeros((width, height))

    @property
    def shape(self):
        return (self.height, self.width)

    def _check_shape(self, arr: np.ndarray, name: str):
        if arr.shape != self.shape:
            raise SizeMismatchError(f'{name} has shape {arr.shape}, while the '
                                    f'transform is configured for {self.shape}')

    def _run(self, psi: np.ndarray, out: np.ndarray, func):
        self._check_shape(psi, 'Input')
        self._check_shape(out, 'Output')

        self._re[...] = psi.real
        self._im[...] = psi.imag
        func(self._re, self._im)

        self._re_t[...] = self._re.T
        self._im_t[...] = self._im.T
        func(self._re_t, self._im_t)

        out.real = self._re_t.T
        out.imag = self._im_t.T
        return out

    def forward(self, psi: np.ndarray, out: np.ndarray = None) -> np.ndarray:
        """
        Forward 2D transform.

        Parameters
        ----------
        psi : ndarray of complex of shape (height, width)
            Grid to transform. Not modified unless passed as out as well.
        out : ndarray of complex of shape (height, width), optional
            Array to write the result into. A new array is allocated if None.
            The default is None.

        Returns
        -------
        out : ndarray of complex of shape (height, width)
            The transformed grid.
        """
        if out is None:
            out = np.empty(self.shape, dtype=complex)
        return self._run(psi, out, transform)

    def inverse(self, psi: np.ndarray, out: np.ndarray = None) -> np.ndarray:
        """
        Inverse 2D transform, normalized so that inverse(forward(x)) == x.
        Parameters as in forward().
        """
        if out is None:
            out = np.empty(self.shape, dtype=complex)
        return self._run(psi, out, inverse_transform)
