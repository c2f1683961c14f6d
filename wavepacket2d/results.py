# -*- coding: utf-8 -*-
"""
Propagation results handlers

Batch propagation records observables of the wave function at regular
timesteps, and optionally snapshots of the wave function itself. The
observables are retrieved as a pandas DataFrame indexed by 'timestep', with
the following fields:

    - t : Simulation time at the timestep
    - norm : Total probability, sum(|psi|^2) dx dy
    - x, y : Position expectation values
    - px, py : Momentum expectation values

Writing results is done by the propagation functions through
PropagationWriter. Results are kept in memory only.
"""

from typing import Dict, Optional

import numpy as np
import pandas as pd

from .fft import FFT2D
from .operators import probability, wave_numbers


def measure(state, fft: Optional[FFT2D] = None) -> Dict[str, float]:
    """
    Calculates the observables of a state's wave function.

    Parameters
    ----------
    state : SimulationState
        State to measure.
    fft : FFT2D, optional
        Transform to use for the momentum distribution. If None, a new one is
        created for the state's grid. The default is None.

    Returns
    -------
    observables : dict
        Norm, position and momentum expectation values. Expectation values are
        normalized by the norm, and are NaN for a vanishing wave function.
    """
    if fft is None:
        fft = FFT2D(state.grid.width, state.grid.height)

    x, y = state.coordinates()
    density = np.abs(state.psi) ** 2
    total = density.sum()

    kx, ky = wave_numbers(state.grid, state.dx, state.dy)
    momentum_density = np.abs(fft.forward(state.psi)) ** 2
    momentum_total = momentum_density.sum()

    with np.errstate(invalid='ignore', divide='ignore'):
        return {'norm': probability(state.psi, state.dx, state.dy),
                'x': float(np.sum(density * x) / total),
                'y': float(np.sum(density * y) / total),
                'px': float(state.hbar * np.sum(momentum_density * kx) / momentum_total),
                'py': float(state.hbar * np.sum(momentum_density * ky) / momentum_total)}


class PropagationResults:
    """
    Results of a batch propagation.

    Parameters
    ----------
    data : pandas.DataFrame
        Observables dataset, indexed by timestep. See the module documentation.
    snapshots : dict, optional
        Wave function snapshots, keyed by timestep. The default is None.
    """

    data: pd.DataFrame
    snapshots: Dict[int, np.ndarray]

    def __init__(self, data: pd.DataFrame,
                 snapshots: Optional[Dict[int, np.ndarray]] = None):
        self.data = data
        self.snapshots = snapshots if snapshots is not None else {}

    def __len__(self):
        return self.data.shape[0]

    def __repr__(self):
        return (f"Propagation results in memory with {len(self)} timesteps "
                f"and {len(self.snapshots)} snapshots")

    @property
    def last_timestep(self) -> int:
        return int(self.data.index.max())

    @property
    def last_time(self) -> float:
        return float(self.data['t'].loc[self.last_timestep])

    def get_observables(self, start: Optional[int] = None,
                        end: Optional[int] = None) -> pd.DataFrame:
        """
        Retrieves a slice of the observables at given timesteps.

        Parameters
        ----------
        start : int, optional
            Starting timestep. If None, then the dataset is taken from the
            first timestep.
        end : int, optional
            Ending timestep (exclusive). If None, then the dataset is taken up
            to (and including) the last timestep.

        Returns
        -------
        dataset : pandas.DataFrame
            The requested observables
        """
        mask = np.ones(len(self.data), dtype=bool)
        if start is not None:
            mask &= self.data.index >= start
        if end is not None:
            mask &= self.data.index < end

        return self.data[mask].sort_index()

    def get_snapshot(self, timestep: int) -> np.ndarray:
        """
        Retrieves the wave function recorded at a timestep.

        Raises
        ------
        KeyError
            If no snapshot was recorded at the timestep.
        """
        if timestep not in self.snapshots:
            raise KeyError(f'No snapshot recorded at timestep {timestep}')
        return self.snapshots[timestep]

    def density(self, timestep: int) -> np.ndarray:
        """Probability density |psi|^2 recorded at a timestep"""
        return np.abs(self.get_snapshot(timestep)) ** 2


class PropagationWriter:
    """
    A class for writing propagation results.

    This class is used internally to collect the results, and is here mainly
    to allow seperation between the propagation and results writing. It fits
    to work in a 'with' statement, assembling the dataset on exit.

    Parameters
    ----------
    keep_snapshots : bool, optional
        Whether to keep copies of the wave function. The default is True.
    """

    def __init__(self, keep_snapshots: bool = True):
        self.keep_snapshots = keep_snapshots
        self._rows = []
        self._index = []
        self.snapshots = {}
        self.data = pd.DataFrame()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        """
        Assembles the collected rows into the observables dataset.
        """
        index = pd.Index(self._index, name='timestep')
        self.data = pd.DataFrame(self._rows, index=index,
                                 columns=['t', 'norm', 'x', 'y', 'px', 'py'])

    def add_results(self, timestep: int, t: float, observables: Dict[str, float],
                    psi: Optional[np.ndarray] = None):
        """
        Adds a record to the dataset.

        Parameters
        ----------
        timestep : int
            Timestep of the record.
        t : float
            Simulation time of the record.
        observables : dict
            Observables, as returned by measure().
        psi : ndarray of complex, optional
            Wave function to snapshot. Copied. Ignored if snapshots are not
            kept. The default is None.
        """
        self._index.append(timestep)
        self._rows.append(dict(observables, t=t))
        if self.keep_snapshots and psi is not None:
            self.snapshots[timestep] = np.copy(psi)

    def results(self) -> PropagationResults:
        return PropagationResults(self.data, self.snapshots)
