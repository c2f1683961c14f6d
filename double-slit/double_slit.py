# -*- coding: utf-8 -*-
"""
Double slit experiment. A Gaussian wave packet hits a wall with two slits and
interferes with itself on the other side.

Should run from the repository root:
> python double-slit/double_slit.py
"""

import logging

import matplotlib.pyplot as plt

from wavepacket2d import (BoundaryMode, ComputationEngine, GridSize,
                          SimulationState, apply_preset, propagate)
from utils import animate_state

logging.basicConfig(level=logging.INFO)

state = SimulationState(GridSize(256, 256))
state.set_boundary_mode(BoundaryMode.BOTH)
apply_preset(state, 'DOUBLE_SLIT')
state.params.brightness = 1.5

engine = ComputationEngine(state.grid)

# Headless run first, to see how much probability the boundaries absorb
results = propagate(state, n_steps=2000, engine=engine, record_every=100,
                    snapshots=False)
print(results.get_observables())

apply_preset(state, 'DOUBLE_SLIT')
ani = animate_state(state, engine, steps_per_frame=20)
plt.show()
