"""TIMESCALES
Time series Analysis of Irregularly Measured Experiments:
Spectra, Characteristic frequencies And Light curve Statistics

This Python module contains the exceptions raised when the input
to one of the analysis functions is not usable.

Code written by: Luc IJspeert
"""


class TimescalesError(ValueError):
    """Base class for all input problems found by the library

    Attributes
    ----------
    kind: str
        Short name of the kind of problem
    """
    kind = 'timescales-error'


class InvalidArgumentError(TimescalesError):
    """The input is structurally malformed (too few points, length mismatch)"""
    kind = 'invalid-argument'


class BadLightCurveError(TimescalesError):
    """The input has the right shape, but its content carries no information

    For example, all timestamps being identical.
    """
    kind = 'degenerate-light-curve'


class NotSortedError(TimescalesError):
    """The timestamps (or bin edges) are not in ascending order"""
    kind = 'not-sorted'


class NegativeFrequencyError(TimescalesError):
    """A frequency that had to be positive was zero or negative"""
    kind = 'negative-frequency'
