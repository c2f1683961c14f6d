# -*- coding: utf-8 -*-
import numpy as np
import pytest

from wavepacket2d import ComputationEngine, GridSize, SimulationParams, SimulationState


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def params():
    return SimulationParams(x0=20.0, y0=32.0, px=1.0, py=0.0, sigma=4.0, dt=0.05)


@pytest.fixture
def state(params):
    """A 64x64 state on a 64x64 domain, so that dx = dy = 1"""
    return SimulationState(GridSize(64, 64), domain_size=64.0, params=params)


@pytest.fixture
def engine(state):
    return ComputationEngine(state.grid)
