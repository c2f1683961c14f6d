# -*- coding: utf-8 -*-
"""
Simulation parameters and the enumerations used to configure a simulation.

The parameter record is owned by a SimulationState and mutated from the
outside between steps. Values that shape the initial wave packet (x0, y0, px,
py, sigma) take effect on the next reset of the wave function, while dt and
boundary_mode take effect on the next step.

Parameters
----------
dt : float
    Time step. May be negative, for backwards propagation.
x0, y0 : float
    Initial center of the Gaussian wave packet, in physical units.
px, py : float
    Initial momentum of the wave packet.
sigma : float
    Initial width of the wave packet, in physical units.
brightness : float
    Render-only brightness scalar. Passed through untouched.
boundary_mode : BoundaryMode or str
    Boundary handling. One of 'reflective', 'absorbing' or 'both'.
barrier_energy : float
    Energy of the reflective wall at the grid edges.
"""

from enum import Enum

from . import utils


class BoundaryMode(Enum):
    """
    Boundary handling mode.

    REFLECTIVE raises a high potential wall on the grid edges, ABSORBING damps
    the wave function in a band near the edges, and BOTH does both at once.
    """
    REFLECTIVE = 'reflective'
    ABSORBING = 'absorbing'
    BOTH = 'both'

    @property
    def reflective(self) -> bool:
        return self in (BoundaryMode.REFLECTIVE, BoundaryMode.BOTH)

    @property
    def absorbing(self) -> bool:
        return self in (BoundaryMode.ABSORBING, BoundaryMode.BOTH)


class ShiftPolicy(Enum):
    """
    Edge policy for integer-cell shifts of the wave function.

    WRAP moves amplitude leaving one edge into the opposite edge, REFLECT
    folds it back into the grid at the edge it left from, and DROP discards it,
    zeroing the vacated cells.
    """
    WRAP = 'wrap'
    REFLECT = 'reflect'
    DROP = 'drop'


class SimulationParams:
    """
    Wrapper class for the simulation parameters.

    The class manages the default values of the parameters, makes sure no
    unknown parameters are passed or set, and allows simple value retrieval and
    mutation as attributes. The parameters are listed in the module
    documentation.
    """
    _defaults = {'dt': utils.INITIAL_DT,
                 'x0': utils.INITIAL_X0,
                 'y0': utils.INITIAL_Y0,
                 'px': utils.INITIAL_P_X,
                 'py': utils.INITIAL_P_Y,
                 'sigma': utils.INITIAL_SIGMA,
                 'brightness': 1.0,
                 'boundary_mode': BoundaryMode.REFLECTIVE,
                 'barrier_energy': utils.WALL_ENERGY}

    def __init__(self, **kwargs):
        # Make sure no unknown args are there
        for arg in kwargs:
            if arg not in self._defaults:
                raise ValueError(f'Configuration got unknown argument {arg}')

        args = dict(self._defaults)
        args.update(kwargs)
        args['boundary_mode'] = BoundaryMode(args['boundary_mode'])
        object.__setattr__(self, '_args', args)

    def __repr__(self):
        """
        Return the canonical string representation of the object.
        In this case, the dictionary's representation is returned
        """
        return repr(self._args)

    def __getattr__(self, name):
        """Convenience value retrieval from the dictionary as attribute"""
        try:
            return self.__dict__['_args'][name]
        except KeyError as E:
            raise AttributeError(name) from E

    def __setattr__(self, name, value):
        if name not in self._defaults:
            raise ValueError(f'Configuration got unknown argument {name}')
        if name == 'boundary_mode':
            value = BoundaryMode(value)
        self._args[name] = value

    def __eq__(self, other):
        if not isinstance(other, SimulationParams):
            return NotImplemented
        return self._args == other._args

    def __getstate__(self):
        return self.__dict__

    def __setstate__(self, d):
        self.__dict__.update(d)

    def copy(self) -> 'SimulationParams':
        """
        Returns an independent copy of the parameters
        """
        return SimulationParams(**self._args)

    def as_dict(self) -> dict:
        return dict(self._args)
