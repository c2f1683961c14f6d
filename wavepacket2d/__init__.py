# -*- coding: utf-8 -*-
"""
Two dimensional wave packet propagation using the split-step Fourier method.

A SimulationState holds the wave function, the potential and the kinetic
operator on a grid, and a ComputationEngine sized to the same grid advances it
in time:

    >>> state = SimulationState(GridSize(256, 256))
    >>> engine = ComputationEngine(state.grid)
    >>> engine.step(state)

For headless runs, propagate() steps a state repeatedly and records its
observables.
"""

from .config import BoundaryMode, ShiftPolicy, SimulationParams
from .engine import ComputationEngine
from .errors import (ConfigurationError, InvalidGridError, InvalidSizeError,
                     SizeMismatchError)
from .fft import FFT2D, inverse_transform, transform
from .operators import NyquistClamp
from .presets import PRESETS, apply_preset
from .propagation import continue_propagation, propagate
from .results import PropagationResults, measure
from .state import SimulationState
from .utils import GridSize

__version__ = '0.1.0'
