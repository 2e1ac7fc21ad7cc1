"""TIMESCALES
Time series Analysis of Irregularly Measured Experiments:
Spectra, Characteristic frequencies And Light curve Statistics

This Python module contains functions for time series analysis;
specifically the Fourier transform and periodogram of irregularly sampled
light curves, and the statistics of pairs of measurements.

Code written by: Luc IJspeert
"""

import numpy as np
import scipy as sp
import scipy.stats
import numba as nb
import astropy.timeseries as apy
from fastprogress import fastprogress

from . import grid_functions as gf
from . import utility as ut
from .exceptions import InvalidArgumentError, BadLightCurveError, NotSortedError, NegativeFrequencyError


def check_light_curve(times, fluxes, freqs, func_name):
    """Check the input of the transform and periodogram functions

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series
    fluxes: numpy.ndarray[float]
        Measurement values of the time series
    freqs: numpy.ndarray[float]
        Frequency grid
    func_name: str
        Name of the calling function, for the error messages

    Returns
    -------
    times: numpy.ndarray[float]
        Timestamps as float array
    fluxes: numpy.ndarray[float]
        Measurement values as float array
    freqs: numpy.ndarray[float]
        Frequency grid as float array

    Raises
    ------
    InvalidArgumentError
        If one of the arrays has more than one dimension
    BadLightCurveError
        If times has at most one distinct value
    NotSortedError
        If times is not in ascending order
    InvalidArgumentError
        If times and fluxes have different lengths
    NegativeFrequencyError
        If some elements of freqs are not positive

    Notes
    -----
    The checks are done in the order listed, the first failing one is raised.
    None of the inputs is modified. Scalars are taken as arrays of length one.
    """
    times = np.atleast_1d(np.asarray(times, dtype=np.float64))
    fluxes = np.atleast_1d(np.asarray(fluxes, dtype=np.float64))
    freqs = np.atleast_1d(np.asarray(freqs, dtype=np.float64))
    if (times.ndim > 1) | (fluxes.ndim > 1) | (freqs.ndim > 1):
        raise InvalidArgumentError(f"Arguments to {func_name}() must be one-dimensional "
                                   f"(gave {times.ndim}, {fluxes.ndim} and {freqs.ndim} dimensions)")
    if not ut.has_distinct_values(times):
        raise BadLightCurveError(f"Argument 'times' to {func_name}() contains only one unique date")
    if not ut.is_sorted(times):
        raise NotSortedError(f"Argument 'times' to {func_name}() is not sorted in ascending order")
    if (len(fluxes) != len(times)):
        raise InvalidArgumentError(f"Arguments 'times' and 'fluxes' to {func_name}() are not the same length "
                                   f"(gave {len(times)} for times and {len(fluxes)} for fluxes)")
    # written so that NaN also fails
    if not np.all(freqs > 0):
        raise NegativeFrequencyError(f"Argument 'freqs' to {func_name}() contains non-positive frequencies")
    return times, fluxes, freqs


@nb.njit(cache=True)
def dft_sum(times, fluxes, freqs):
    """Literal summation of the discrete Fourier transform

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series
    fluxes: numpy.ndarray[float]
        Measurement values of the time series
    freqs: numpy.ndarray[float]
        Frequency grid

    Returns
    -------
    dft: numpy.ndarray[complex]
        Fourier transform at each frequency

    Notes
    -----
    No input checks, use dft.
    """
    two_pi = 2 * np.pi
    dft = np.zeros(len(freqs), dtype=np.complex128)
    for i in range(len(freqs)):
        omega = two_pi * freqs[i]
        ft = 0j
        for j in range(len(times)):
            ft += fluxes[j] * np.exp(-1j * omega * times[j])
        dft[i] = ft
    return dft


def dft(times, fluxes, freqs):
    """Calculates the discrete Fourier transform for a list of times and fluxes

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order
        and with at least two unique values
    fluxes: numpy.ndarray[float]
        Measurement values of the time series, fluxes[i] taken at times[i]
    freqs: numpy.ndarray[float]
        The frequency grid over which the DFT is calculated, all positive.
        See freq_gen for a quick way to generate a grid.

    Returns
    -------
    dft: numpy.ndarray[complex]
        Fourier transform at each frequency: dft[i] is the transform
        evaluated at freqs[i]

    Raises
    ------
    BadLightCurveError
        If times has at most one distinct value
    NotSortedError
        If times is not in ascending order
    InvalidArgumentError
        If times and fluxes have different lengths
    NegativeFrequencyError
        If some elements of freqs are not positive

    Notes
    -----
    The transform is F(f) = sum_j fluxes[j] exp(-2 pi i f times[j]), summed
    in the given order. This is the brute force O(N F) computation, meant as
    reference implementation for irregular sampling; no window or detrending
    is applied.

    A new array is returned, the arguments are never changed, also not
    when an error is raised.
    """
    times, fluxes, freqs = check_light_curve(times, fluxes, freqs, 'dft')
    return dft_sum(times, fluxes, freqs)


def spectral_window(times, freqs):
    """Computes the modulus square of the spectral window W_N(f) of a set of
    time points at the given frequencies.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series
    freqs: numpy.ndarray[float]
        Frequency points to calculate the window. Inverse unit of 'times'

    Returns
    -------
    spec_win: numpy.ndarray[float]
        The spectral window at the given frequencies, |W(freqs)|^2

    Notes
    -----
    The spectral window is the Fourier transform of the window function
    w_N(t) = 1/N sum(Dirac(t - t_i))
    The time points do not need to be equidistant.
    The normalisation is such that 1.0 is returned at frequency 0.
    """
    n_time = len(times)
    win_kernel = dft(times, np.ones(n_time), freqs)
    spec_win = np.abs(win_kernel)**2 / n_time**2
    return spec_win


@nb.njit(cache=True)
def lomb_scargle_sum(times, fluxes, freqs):
    """Classical Lomb-Scargle power, without normalisation

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series (mean subtracted)
    fluxes: numpy.ndarray[float]
        Measurement values of the time series (mean subtracted)
    freqs: numpy.ndarray[float]
        Frequency grid

    Returns
    -------
    power: numpy.ndarray[float]
        The periodogram, (YC^2/CC + YS^2/SS)/2 at each frequency
    """
    two_pi = 2 * np.pi
    power = np.zeros(len(freqs))
    for i in range(len(freqs)):
        omega = two_pi * freqs[i]
        # define tau
        sin_2 = 0.
        cos_2 = 0.
        for j in range(len(times)):
            sin_2 += np.sin(2 * omega * times[j])
            cos_2 += np.cos(2 * omega * times[j])
        omega_tau = 0.5 * np.arctan2(sin_2, cos_2)
        # shifted cos and sin sums
        yc = 0.
        ys = 0.
        cc = 0.
        ss = 0.
        for j in range(len(times)):
            cos = np.cos(omega * times[j] - omega_tau)
            sin = np.sin(omega * times[j] - omega_tau)
            yc += fluxes[j] * cos
            ys += fluxes[j] * sin
            cc += cos**2
            ss += sin**2
        # at the Nyquist frequency of a regular grid one of the terms vanishes
        p = 0.
        if (cc > 0):
            p += yc**2 / cc
        if (ss > 0):
            p += ys**2 / ss
        power[i] = p / 2
    return power


def lomb_scargle(times, fluxes, freqs):
    """Calculates the Lomb-Scargle periodogram for a time series.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order
    fluxes: numpy.ndarray[float]
        Measurement values of the time series
    freqs: numpy.ndarray[float]
        The frequency grid over which the periodogram is calculated, all positive.

    Returns
    -------
    power: numpy.ndarray[float]
        The periodogram power at each frequency, normalised by the
        variance of the fluxes

    Raises
    ------
    BadLightCurveError
        If times has at most one distinct value, or fluxes is constant
    NotSortedError
        If times is not in ascending order
    InvalidArgumentError
        If times and fluxes have different lengths
    NegativeFrequencyError
        If some elements of freqs are not positive

    Notes
    -----
    Normalisation of Scargle (1982), Horne & Baliunas (1986):
    a sinusoid of amplitude A sampled N times gives a peak of about
    N A^2 / (4 var), for white noise the power is exponentially distributed.
    The times and fluxes are mean subtracted before use.
    """
    times, fluxes, freqs = check_light_curve(times, fluxes, freqs, 'lomb_scargle')
    variance = np.var(fluxes, ddof=1)
    if not (variance > 0):
        raise BadLightCurveError("Argument 'fluxes' to lomb_scargle() has zero variance")
    power = lomb_scargle_sum(times - np.mean(times), fluxes - np.mean(fluxes), freqs)
    return power / variance


def astropy_lomb_scargle(times, fluxes, freqs, method='fast'):
    """Wrapper for the astropy Lomb-Scargle periodogram, normalised as lomb_scargle.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order
    fluxes: numpy.ndarray[float]
        Measurement values of the time series
    freqs: numpy.ndarray[float]
        The frequency grid over which the periodogram is calculated, all positive.
    method: str
        Passed on to astropy.timeseries.LombScargle.power.
        Use 'slow' or 'cython' for the exact periodogram.

    Returns
    -------
    power: numpy.ndarray[float]
        The periodogram power at each frequency, normalised by the
        variance of the fluxes

    Notes
    -----
    Approximation using fft, much faster than lomb_scargle in method='fast'.
    Beware of computing narrow frequency windows, as there is inconsistency
    when doing this.

    Useful extra information: VanderPlas 2018,
    https://ui.adsabs.harvard.edu/abs/2018ApJS..236...16V/abstract
    """
    times, fluxes, freqs = check_light_curve(times, fluxes, freqs, 'astropy_lomb_scargle')
    variance = np.var(fluxes, ddof=1)
    if not (variance > 0):
        raise BadLightCurveError("Argument 'fluxes' to astropy_lomb_scargle() has zero variance")
    # times and fluxes are mean subtracted (reduce correlation and avoid peak at f=0)
    times_ms = times - np.mean(times)
    fluxes_ms = fluxes - np.mean(fluxes)
    ls = apy.LombScargle(times_ms, fluxes_ms, fit_mean=False, center_data=False)
    power = ls.power(freqs, normalization='psd', method=method)
    return power / variance


def ls_normal_edf(times, freqs, n_sims=1000, seed=None, verbose=False):
    """Calculates the empirical distribution function of false peaks for a
    Lomb-Scargle periodogram.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order
    freqs: numpy.ndarray[float]
        The frequency grid over which the periodogram is calculated, all positive.
    n_sims: int
        Number of white noise light curves to simulate
    seed: None, int
        Seed for the random number generator
    verbose: bool
        If set to True, a progress bar is shown

    Returns
    -------
    powers: numpy.ndarray[float]
        The highest periodogram peak of each simulation, in ascending order
    probs: numpy.ndarray[float]
        The fraction of simulations with a highest peak at or below powers[i]

    Raises
    ------
    InvalidArgumentError
        If n_sims is smaller than one
    BadLightCurveError, NotSortedError, NegativeFrequencyError
        See lomb_scargle

    Notes
    -----
    The simulated light curves are Gaussian white noise sampled at times,
    so the distribution accounts for the particular sampling and grid.
    """
    if (n_sims < 1):
        raise InvalidArgumentError(f"Parameter 'n_sims' in ls_normal_edf() must be at least 1 (gave {n_sims})")
    times, _, freqs = check_light_curve(times, np.zeros(len(times)), freqs, 'ls_normal_edf')
    times_ms = times - np.mean(times)
    rng = np.random.default_rng(seed)
    fastprogress.printing = lambda: verbose
    peaks = np.zeros(n_sims)
    for k in fastprogress.progress_bar(range(n_sims), display=verbose):
        fluxes = rng.standard_normal(len(times))
        variance = np.var(fluxes, ddof=1)
        power = lomb_scargle_sum(times_ms, fluxes - np.mean(fluxes), freqs)
        peaks[k] = np.max(power) / variance
    powers = np.sort(peaks)
    probs = np.arange(1, n_sims + 1) / n_sims
    return powers, probs


def ls_threshold(times, freqs, fap, n_sims=1000, seed=None, verbose=False):
    """Calculates the significance threshold for a Lomb-Scargle periodogram.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order
    freqs: numpy.ndarray[float]
        The frequency grid over which the periodogram is calculated, all positive.
    fap: float
        False alarm probability, between 0 and 1 (exclusive)
    n_sims: int
        Number of white noise light curves to simulate
    seed: None, int
        Seed for the random number generator
    verbose: bool
        If set to True, a progress bar is shown

    Returns
    -------
    float
        The periodogram power that white noise exceeds with probability fap

    Raises
    ------
    InvalidArgumentError
        If fap is not between 0 and 1, or n_sims is smaller than one
    BadLightCurveError, NotSortedError, NegativeFrequencyError
        See lomb_scargle

    See Also
    --------
    ls_normal_edf
    """
    if not (0 < fap < 1):
        raise InvalidArgumentError(f"Parameter 'fap' in ls_threshold() must be between 0 and 1 (gave {fap})")
    powers, probs = ls_normal_edf(times, freqs, n_sims=n_sims, seed=seed, verbose=verbose)
    return float(np.quantile(powers, 1 - fap))


def check_offsets(offsets, func_name):
    """Check the time lag grid of the autocorrelation functions

    Parameters
    ----------
    offsets: numpy.ndarray[float]
        Time lags
    func_name: str
        Name of the calling function, for the error messages

    Returns
    -------
    offsets: numpy.ndarray[float]
        Time lags as float array
    d_offset: float
        The step of the lag grid

    Raises
    ------
    InvalidArgumentError
        If offsets is not one-dimensional, has fewer than two elements
        or is not evenly spaced
    NotSortedError
        If offsets is not strictly increasing
    """
    offsets = np.asarray(offsets, dtype=np.float64)
    if (offsets.ndim != 1) | (offsets.size < 2):
        raise InvalidArgumentError(f"Argument 'offsets' to {func_name}() must be a list of at least 2 time lags")
    if not ut.is_strictly_increasing(offsets):
        raise NotSortedError(f"Argument 'offsets' to {func_name}() is not strictly increasing")
    steps = np.diff(offsets)
    d_offset = (offsets[-1] - offsets[0]) / (len(offsets) - 1)
    if not np.allclose(steps, d_offset, rtol=1e-6, atol=0):
        raise InvalidArgumentError(f"Argument 'offsets' to {func_name}() is not a uniform grid "
                                   f"(steps between {np.min(steps)} and {np.max(steps)})")
    return offsets, d_offset


def acf_freqs(times, d_offset, max_freq, func_name):
    """Frequency grid on which the autocorrelation functions are summed

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series
    d_offset: float
        Step of the time lag grid
    max_freq: None, float
        Highest frequency of the grid.
        If left None, the Nyquist frequency of the lag grid, 1/(2 d_offset)
    func_name: str
        Name of the calling function, for the error messages

    Returns
    -------
    freqs: numpy.ndarray[float]
        Frequencies from 1/(10 T) up to max_freq in steps of 1/(10 T)
    """
    f_step = 1 / (gf.OVERSAMPLING * gf.delta_t(times))
    if max_freq is None:
        max_freq = 0.5 / d_offset
    if not (max_freq >= f_step):
        raise InvalidArgumentError(f"Parameter 'max_freq' in {func_name}() is below the frequency resolution "
                                   f"(gave {max_freq}, need at least {f_step})")
    return gf.freq_gen(times, f_min=f_step, f_max=max_freq, f_step=f_step)


def acf_sum(freqs, power, offsets):
    """Cosine transform of a power spectrum, normalised to one at zero lag

    Parameters
    ----------
    freqs: numpy.ndarray[float]
        Frequency grid
    power: numpy.ndarray[float]
        Power at each frequency, not all zero
    offsets: numpy.ndarray[float]
        Time lags

    Returns
    -------
    acf: numpy.ndarray[float]
        sum(power cos(2 pi f tau)) / sum(power) for each lag tau
    """
    cos_term = np.cos(2 * np.pi * offsets[:, np.newaxis] * freqs[np.newaxis, :])
    return (cos_term @ power) / np.sum(power)


def auto_corr(times, fluxes, offsets, max_freq=None):
    """Calculates the autocorrelation function for a time series.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order
    fluxes: numpy.ndarray[float]
        Measurement values of the time series
    offsets: numpy.ndarray[float]
        The time lags at which the autocorrelation is calculated,
        an evenly spaced and strictly increasing grid
    max_freq: None, float
        Highest frequency taken into account.
        If left None, the Nyquist frequency of the lag grid is used

    Returns
    -------
    acf: numpy.ndarray[float]
        The autocorrelation at each time lag, normalised to 1 at lag zero

    Raises
    ------
    BadLightCurveError
        If times has at most one distinct value, or fluxes is constant
    NotSortedError
        If times or offsets is not in ascending order
    InvalidArgumentError
        If times and fluxes have different lengths, offsets is not an
        even grid of at least two lags, or max_freq is below 1/(10 T)

    Notes
    -----
    The autocorrelation is the Fourier transform of the power spectrum
    (Wiener-Khinchin), which is well defined for irregular sampling, see
    Scargle (1989): https://ui.adsabs.harvard.edu/abs/1989ApJ...343..874S/abstract
    The power is the squared modulus of the dft of the mean subtracted
    fluxes, on a grid oversampled ten times with respect to 1/T.
    Use ac_window on the same lags to see the effect of the sampling.
    """
    times, fluxes, _ = check_light_curve(times, fluxes, [1.0], 'auto_corr')
    offsets, d_offset = check_offsets(offsets, 'auto_corr')
    if not (np.var(fluxes) > 0):
        raise BadLightCurveError("Argument 'fluxes' to auto_corr() has zero variance")
    freqs = acf_freqs(times, d_offset, max_freq, 'auto_corr')
    power = np.abs(dft(times, fluxes - np.mean(fluxes), freqs))**2
    return acf_sum(freqs, power, offsets)


def ac_window(times, offsets, max_freq=None):
    """Calculates the autocorrelation window function for a time sampling.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order
    offsets: numpy.ndarray[float]
        The time lags at which the window is calculated,
        an evenly spaced and strictly increasing grid
    max_freq: None, float
        Highest frequency taken into account.
        If left None, the Nyquist frequency of the lag grid is used

    Returns
    -------
    wf: numpy.ndarray[float]
        The window function at each time lag, normalised to 1 at lag zero

    Raises
    ------
    BadLightCurveError
        If times has at most one distinct value
    NotSortedError
        If times or offsets is not in ascending order
    InvalidArgumentError
        If offsets is not an even grid of at least two lags,
        or max_freq is below 1/(10 T)

    Notes
    -----
    Same as auto_corr, with the spectral window in place of the power
    spectrum of the data.
    """
    times, _, _ = check_light_curve(times, np.zeros(np.size(times)), [1.0], 'ac_window')
    offsets, d_offset = check_offsets(offsets, 'ac_window')
    freqs = acf_freqs(times, d_offset, max_freq, 'ac_window')
    spec_win = spectral_window(times, freqs)
    return acf_sum(freqs, spec_win, offsets)


def dmdt(times, fluxes):
    """Calculates a delta-m delta-t plot, the differences of all pairs of points.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order
    fluxes: numpy.ndarray[float]
        Measurement values of the time series (magnitudes or fluxes)

    Returns
    -------
    delta_t: numpy.ndarray[float]
        Time differences times[j] - times[i] for all pairs i < j,
        in ascending order
    delta_m: numpy.ndarray[float]
        The differences fluxes[j] - fluxes[i] of the same pairs

    Raises
    ------
    InvalidArgumentError
        If times has fewer than two elements, or times and fluxes
        have different lengths
    NotSortedError
        If times is not in ascending order

    Notes
    -----
    Both output arrays have length N(N-1)/2.
    """
    times = np.asarray(times, dtype=np.float64)
    fluxes = np.asarray(fluxes, dtype=np.float64)
    if (len(times) < 2):
        raise InvalidArgumentError("Argument 'times' to dmdt() contains fewer than 2 observations")
    if (len(fluxes) != len(times)):
        raise InvalidArgumentError(f"Arguments 'times' and 'fluxes' to dmdt() are not the same length "
                                   f"(gave {len(times)} for times and {len(fluxes)} for fluxes)")
    if not ut.is_sorted(times):
        raise NotSortedError("Argument 'times' to dmdt() is not sorted in ascending order")
    i_first, i_second = np.triu_indices(len(times), k=1)
    delta_t = times[i_second] - times[i_first]
    delta_m = fluxes[i_second] - fluxes[i_first]
    sorter = np.argsort(delta_t, kind='stable')
    return delta_t[sorter], delta_m[sorter]


def check_dmdt_bins(delta_t, delta_m, bin_edges, func_name):
    """Check the input of the delta-m delta-t bin statistics

    Parameters
    ----------
    delta_t: numpy.ndarray[float]
        Time differences of pairs of points
    delta_m: numpy.ndarray[float]
        Flux (or magnitude) differences of the same pairs
    bin_edges: numpy.ndarray[float]
        Edges of the delta_t bins
    func_name: str
        Name of the calling function, for the error messages

    Returns
    -------
    delta_t: numpy.ndarray[float]
        Time differences as float array
    delta_m: numpy.ndarray[float]
        Flux differences as float array
    bin_edges: numpy.ndarray[float]
        Bin edges as float array

    Raises
    ------
    InvalidArgumentError
        If delta_t and delta_m have different lengths or there are
        fewer than two bin edges
    NotSortedError
        If bin_edges is not strictly increasing
    """
    delta_t = np.asarray(delta_t, dtype=np.float64)
    delta_m = np.asarray(delta_m, dtype=np.float64)
    bin_edges = np.asarray(bin_edges, dtype=np.float64)
    if (len(delta_t) != len(delta_m)):
        raise InvalidArgumentError(f"Arguments 'delta_t' and 'delta_m' to {func_name}() are not the same length "
                                   f"(gave {len(delta_t)} for delta_t and {len(delta_m)} for delta_m)")
    if (len(bin_edges) < 2):
        raise InvalidArgumentError(f"Argument 'bin_edges' to {func_name}() needs at least 2 edges")
    if not ut.is_strictly_increasing(bin_edges):
        raise NotSortedError(f"Argument 'bin_edges' to {func_name}() is not strictly increasing")
    return delta_t, delta_m, bin_edges


def hi_amp_bin_frac(delta_t, delta_m, bin_edges, threshold):
    """Computes the fraction of pairs of measurements above some threshold found
    in each delta-t bin of a delta-m delta-t plot.

    Parameters
    ----------
    delta_t: numpy.ndarray[float]
        Time differences of pairs of points, see dmdt
    delta_m: numpy.ndarray[float]
        Flux (or magnitude) differences of the same pairs
    bin_edges: numpy.ndarray[float]
        Edges of the delta_t bins, strictly increasing
    threshold: float
        Minimum delta_m to count a pair as high amplitude

    Returns
    -------
    fracs: numpy.ndarray[float]
        Fraction of pairs in each bin with delta_m >= threshold,
        NaN where a bin is empty

    Raises
    ------
    InvalidArgumentError
        If delta_t and delta_m have different lengths or there are
        fewer than two bin edges
    NotSortedError
        If bin_edges is not strictly increasing

    Notes
    -----
    Uses scipy.stats.binned_statistic: bins are half open except the last.
    Pass np.abs(delta_m) to count changes in both directions.
    """
    delta_t, delta_m, bin_edges = check_dmdt_bins(delta_t, delta_m, bin_edges, 'hi_amp_bin_frac')
    fracs = np.full(len(bin_edges) - 1, np.nan)
    if (len(delta_t) == 0):
        return fracs
    high = (delta_m >= threshold).astype(np.float64)
    with np.errstate(invalid='ignore', divide='ignore'):
        fracs, _, _ = sp.stats.binned_statistic(delta_t, high, statistic='mean', bins=bin_edges)
    return fracs


def delta_m_bin_quantile(delta_t, delta_m, bin_edges, q):
    """Computes the quantile of pairs of measurements found in each delta-t bin
    of a delta-m delta-t plot.

    Parameters
    ----------
    delta_t: numpy.ndarray[float]
        Time differences of pairs of points, see dmdt
    delta_m: numpy.ndarray[float]
        Flux (or magnitude) differences of the same pairs
    bin_edges: numpy.ndarray[float]
        Edges of the delta_t bins, strictly increasing
    q: float
        The quantile to compute, between 0 and 1

    Returns
    -------
    quants: numpy.ndarray[float]
        The q-quantile of delta_m in each bin, NaN where a bin is empty

    Raises
    ------
    InvalidArgumentError
        If delta_t and delta_m have different lengths, there are
        fewer than two bin edges or q is not between 0 and 1
    NotSortedError
        If bin_edges is not strictly increasing

    Notes
    -----
    Uses scipy.stats.binned_statistic: bins are half open except the last.
    """
    delta_t, delta_m, bin_edges = check_dmdt_bins(delta_t, delta_m, bin_edges, 'delta_m_bin_quantile')
    if not (0 <= q <= 1):
        raise InvalidArgumentError(f"Parameter 'q' in delta_m_bin_quantile() must be between 0 and 1 (gave {q})")
    quants = np.full(len(bin_edges) - 1, np.nan)
    if (len(delta_t) == 0):
        return quants
    quants, _, _ = sp.stats.binned_statistic(delta_t, delta_m, statistic=lambda x: np.quantile(x, q),
                                             bins=bin_edges)
    return quants
