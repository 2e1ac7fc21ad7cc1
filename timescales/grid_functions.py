"""TIMESCALES
Time series Analysis of Irregularly Measured Experiments:
Spectra, Characteristic frequencies And Light curve Statistics

This Python module contains functions that characterise the sampling of a
time series, and the generation of frequency grids from those characteristics.

Code written by: Luc IJspeert
"""

import numpy as np
import numba as nb

from . import utility as ut
from .exceptions import InvalidArgumentError, BadLightCurveError, NotSortedError, NegativeFrequencyError


# default oversampling of the frequency grid with respect to 1/T
OVERSAMPLING = 10


@nb.njit(cache=True)
def min_max(times):
    """Minimum and maximum of an array in a single pass

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, at least one element

    Returns
    -------
    t_min: float
        The smallest value in times
    t_max: float
        The largest value in times
    """
    t_min = times[0]
    t_max = t_min
    for t in times:
        if t < t_min:
            t_min = t
        if t > t_max:
            t_max = t
    return t_min, t_max


@nb.njit(cache=True)
def min_positive_step(times):
    """Smallest strictly positive difference between consecutive timestamps

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series

    Returns
    -------
    dt_min: float
        The smallest positive step, or zero if there is none

    Notes
    -----
    On a tie the first minimum found is kept.
    """
    dt_min = 0.0
    for i in range(1, len(times)):
        dt = times[i] - times[i - 1]
        if (dt > 0) & ((dt < dt_min) | (dt_min == 0.0)):
            dt_min = dt
    return dt_min


def delta_t(times):
    """Returns the time interval covered by the data.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, need not be sorted

    Returns
    -------
    float
        The time between the earliest and the latest observation,
        in the unit of times

    Raises
    ------
    InvalidArgumentError
        If times has fewer than two elements
    BadLightCurveError
        If times contains only one unique value
    """
    times = np.asarray(times, dtype=np.float64)
    if (times.size < 2):
        raise InvalidArgumentError("Parameter 'times' in delta_t() contains fewer than 2 observations")
    t_min, t_max = min_max(times)
    if not (t_max > t_min):
        raise BadLightCurveError("Parameter 'times' in delta_t() contains only one unique value")
    return float(t_max - t_min)


def max_freq(times):
    """Returns the highest frequency that can be probed by the data.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order

    Returns
    -------
    float
        The Nyquist frequency of the smallest time step, 1/(2 dt_min),
        in the inverse unit of times

    Raises
    ------
    InvalidArgumentError
        If times has fewer than two elements
    NotSortedError
        If times is not in ascending order
    BadLightCurveError
        If times contains only one unique value

    Notes
    -----
    dt_min is the smallest strictly positive interval between two
    consecutive observations, repeated timestamps are skipped.
    """
    times = np.asarray(times, dtype=np.float64)
    if (times.size < 2):
        raise InvalidArgumentError("Parameter 'times' in max_freq() contains fewer than 2 observations")
    # single pass, O(N)
    if not ut.is_sorted(times):
        raise NotSortedError("Parameter 'times' in max_freq() is unsorted")
    dt_min = min_positive_step(times)
    if (dt_min == 0.0):
        raise BadLightCurveError("Parameter 'times' in max_freq() contains only one unique value")
    return 0.5 / dt_min


def pseudo_nyquist_freq(times):
    """Returns the pseudo-Nyquist frequency for a grid of observations.

    The pseudo-Nyquist frequency is defined as N/2T, where N is the number of
    observations and T is the length of the time interval covered by the data.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, need not be sorted

    Returns
    -------
    float
        The pseudo-Nyquist frequency, in the inverse unit of times

    Raises
    ------
    InvalidArgumentError
        If times has fewer than two elements
    BadLightCurveError
        If times contains only one unique value
    """
    # input validation by delta_t
    t_tot = delta_t(times)
    return 0.5 * np.size(times) / t_tot


def freq_gen(times, f_min=None, f_max=None, f_step=None):
    """Creates a frequency grid that can be fed to the time series analysis functions.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series
    f_min: float, None
        Lowest frequency of the grid.
        If left None, default is f_min = 1/T
    f_max: float, None
        Highest frequency of the grid (included if it falls on the grid).
        If left None, default is the pseudo-Nyquist frequency N/(2T)
    f_step: float, None
        Frequency step of the grid.
        If left None, default is f_step = 1/(10*T) (oversampling factor of ten)

    Returns
    -------
    freqs: numpy.ndarray[float]
        Equally spaced, positive frequencies from f_min up to f_max,
        none of them above f_max

    Raises
    ------
    InvalidArgumentError
        If times has fewer than two elements, f_step is not positive
        or f_max is lower than f_min
    BadLightCurveError
        If times contains only one unique value
    NegativeFrequencyError
        If f_min is not positive

    Notes
    -----
    T is the time base of the observations, see delta_t.
    """
    t_tot = delta_t(times)
    if f_min is None:
        f_min = 1 / t_tot
    if f_max is None:
        f_max = pseudo_nyquist_freq(times)
    if f_step is None:
        f_step = 1 / (OVERSAMPLING * t_tot)
    if not (f_min > 0):
        raise NegativeFrequencyError(f"Parameter 'f_min' in freq_gen() must be positive (gave {f_min})")
    if not (f_step > 0):
        raise InvalidArgumentError(f"Parameter 'f_step' in freq_gen() must be positive (gave {f_step})")
    if not (f_max >= f_min):
        raise InvalidArgumentError(f"Parameter 'f_max' in freq_gen() is lower than 'f_min' "
                                   f"(gave {f_max} and {f_min})")
    # small tolerance so that f_max is kept when it lies on the grid
    n_freq = int(np.floor((f_max - f_min) / f_step + 1e-9)) + 1
    freqs = f_min + np.arange(n_freq) * f_step
    # rounding must not push the last point past f_max
    freqs[-1] = min(freqs[-1], f_max)
    return freqs
