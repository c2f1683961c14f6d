# -*- coding: utf-8 -*-
"""
Batch propagation of a simulation state, for use without an interactive
driver (scripts, notebooks, tests).

The state is advanced by an engine for a given number of steps, and its
observables are recorded every few steps into a PropagationResults object.
"""

import logging
from typing import Optional

import pandas as pd
from tqdm import tqdm

from .engine import ComputationEngine
from .results import PropagationResults, PropagationWriter, measure


def propagate(state, n_steps: int, engine: Optional[ComputationEngine] = None,
              record_every: int = 1, snapshots: bool = False, t0: float = 0,
              timestep0: int = 0, verbose: bool = True) -> PropagationResults:
    """
    Propagates a state in time.

    Parameters
    ----------
    state : SimulationState
        The state to propagate. Modified in place.
    n_steps : int
        Number of steps to take.
    engine : ComputationEngine, optional
        Engine to step with. If None, one is created for the state's grid.
        The default is None.
    record_every : int, optional
        Number of steps between records. The initial state and the final state
        are always recorded. The default is 1.
    snapshots : bool, optional
        Whether to record copies of the wave function alongside the
        observables. Each snapshot is a full copy of psi, 1 MB on a 256x256
        grid. The default is False.
    t0 : float, optional
        Simulation time of the initial state. The default is 0.
    timestep0 : int, optional
        Timestep index of the initial state. The default is 0.
    verbose : bool, optional
        Whether to show a progress bar. The default is True.

    Returns
    -------
    results : PropagationResults
        The recorded observables and snapshots.
    """
    if record_every < 1:
        raise ValueError(f'record_every must be positive, got {record_every}')

    logger = logging.getLogger('wavepacket2d.propagation')
    if engine is None:
        engine = ComputationEngine(state.grid)

    logger.debug("Starting propagation of %d steps, recording every %d steps",
                 n_steps, record_every)

    t = t0
    with PropagationWriter(keep_snapshots=snapshots) as writer:
        writer.add_results(timestep0, t, measure(state, engine.fft), state.psi)

        for i in tqdm(range(1, n_steps + 1), disable=not verbose):
            engine.step(state)
            t += state.params.dt

            if i % record_every == 0 or i == n_steps:
                writer.add_results(timestep0 + i, t, measure(state, engine.fft),
                                   state.psi)

    results = writer.results()
    logger.info("Propagated %d steps up to t=%f. Final norm: %f",
                n_steps, t, results.data['norm'].iloc[-1])
    return results


def continue_propagation(results: PropagationResults, state, n_steps: int,
                         **kwargs) -> PropagationResults:
    """
    Convenience function. Continues a propagation of a state, using the last
    recorded time and timestep of previous results as starting point, and
    merges the new records into the previous ones.

    The state is expected to be the one propagated into results, as left by the
    propagation. The rest of the parameters are passed to propagate().

    Returns
    -------
    results : PropagationResults
        Previous and new results together.
    """
    new = propagate(state, n_steps, t0=results.last_time,
                    timestep0=results.last_timestep, **kwargs)

    # The first new record duplicates the last previous one
    data = pd.concat([results.data, new.data.iloc[1:]])
    snapshots = dict(results.snapshots)
    snapshots.update(new.snapshots)

    return PropagationResults(data, snapshots)
