# -*- coding: utf-8 -*-
"""
Configuration errors raised by wavepacket2d.

All of them indicate a structurally invalid grid or buffer, and are never
recoverable by retrying the operation that raised them.
"""


class ConfigurationError(ValueError):
    """Base class for grid and buffer configuration errors"""


class InvalidSizeError(ConfigurationError):
    """Transform invoked with an extent that is not a power of two"""


class SizeMismatchError(ConfigurationError):
    """Buffer shape inconsistent with the configured grid"""


class InvalidGridError(ConfigurationError):
    """Missing, non-integer or non-positive grid extents"""
