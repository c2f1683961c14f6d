# -*- coding: utf-8 -*-
"""
Quantum tunneling. A wave packet hits a barrier higher than its kinetic
energy, and part of it passes through.

Should run from the repository root:
> python tunneling/tunneling.py
"""

import numpy as np
import matplotlib.pyplot as plt

from wavepacket2d import ComputationEngine, SimulationState, apply_preset, propagate

state = SimulationState()
apply_preset(state, 'TUNNELING')
engine = ComputationEngine(state.grid)

results = propagate(state, n_steps=4000, engine=engine, record_every=200,
                    snapshots=True)

# Probability that passed the barrier at each recorded timestep
x, _ = state.coordinates()
passed = [np.sum(results.density(step)[:, x[0] > state.domain_size / 2]) * state.dx * state.dy
          for step in results.snapshots]

plt.figure()
plt.plot(results.data['t'], passed)
plt.xlabel('t')
plt.ylabel('Transmitted probability')
plt.show()
