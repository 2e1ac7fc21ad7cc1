"""TIMESCALES
Time series Analysis of Irregularly Measured Experiments:
Spectra, Characteristic frequencies And Light curve Statistics

This module contains utility functions for data processing, unit conversions
and loading in data (some functions specific to light curve text files).

Code written by: Luc IJspeert
"""

import os
import datetime
import h5py
import numpy as np
import numba as nb


@nb.njit(cache=True)
def is_sorted(a):
    """Check whether an array is in ascending order, in a single pass

    Parameters
    ----------
    a: numpy.ndarray[float]
        The array to check

    Returns
    -------
    bool
        True if a[i] <= a[i+1] for all i

    Notes
    -----
    Equal neighbours count as sorted, only inversions do not.
    An array with fewer than two elements is sorted.
    """
    for i in range(1, len(a)):
        if a[i - 1] > a[i]:
            return False
    return True


@nb.njit(cache=True)
def is_strictly_increasing(a):
    """Check whether an array is strictly increasing, in a single pass

    Parameters
    ----------
    a: numpy.ndarray[float]
        The array to check

    Returns
    -------
    bool
        True if a[i] < a[i+1] for all i
    """
    for i in range(1, len(a)):
        if not (a[i - 1] < a[i]):
            return False
    return True


@nb.njit(cache=True)
def has_distinct_values(a):
    """Check whether an array contains at least two distinct values

    Parameters
    ----------
    a: numpy.ndarray[float]
        The array to check

    Returns
    -------
    bool
        False for empty arrays, single elements and constant arrays
    """
    for i in range(1, len(a)):
        if a[i] != a[0]:
            return True
    return False


def load_light_curve(file_name):
    """Load in a light curve from a text file

    Parameters
    ----------
    file_name: str
        File name (including path) of the light curve

    Returns
    -------
    times: numpy.ndarray[float]
        Timestamps of the time series
    fluxes: numpy.ndarray[float]
        Measurement values of the time series

    Notes
    -----
    The text file is expected to have (at least) two whitespace separated
    columns: times and fluxes, in that order. Lines starting with '#' are
    ignored. Further columns (e.g. errors) are not read.
    """
    times, fluxes = np.loadtxt(file_name, usecols=(0, 1), unpack=True, ndmin=2)
    return times, fluxes


def save_results_hdf5(file_name, grid_stats, freqs, dft_ampl, power, f_peak, threshold=None, target_id='none',
                      description='none'):
    """Save the results of a light curve analysis to an hdf5 file.

    Parameters
    ----------
    file_name: str
        File name (including path) for saving the results.
    grid_stats: list[float]
        Statistics of the sampling: delta_t, max_freq, pseudo_nyquist_freq, n_points
    freqs: numpy.ndarray[float]
        The frequency grid
    dft_ampl: numpy.ndarray[float]
        Modulus of the discrete Fourier transform on the grid
    power: numpy.ndarray[float]
        Lomb-Scargle periodogram on the grid
    f_peak: float
        Frequency of the highest periodogram peak
    threshold: None, float
        Periodogram power threshold for the false alarm probability,
        None if not calculated
    target_id: int, str
        Identifier of the light curve
    description: str
        Optional description of the saved results

    Returns
    -------
    file_name: str
        The name of the written file (the extension is forced to .hdf5)

    Notes
    -----
    The file contains the data sets (array-like) and attributes
    to describe the data, in hdf5 format.

    A missing threshold is stored as -1.
    """
    if threshold is None:
        threshold = -1
    delta_t, max_freq, pnf, n_points = grid_stats
    # check some input
    ext = os.path.splitext(os.path.basename(file_name))[1]
    if (ext != '.hdf5'):
        file_name = os.path.splitext(file_name)[0] + '.hdf5'
    # create the file
    with h5py.File(file_name, 'w') as file:
        file.attrs['identifier'] = os.path.splitext(os.path.basename(file_name))[0]  # the file name without extension
        file.attrs['target_id'] = str(target_id)
        file.attrs['description'] = description
        file.attrs['date_time'] = str(datetime.datetime.now())
        file.attrs['delta_t'] = delta_t  # total time base of observations
        file.attrs['max_freq'] = max_freq  # Nyquist frequency of the smallest time step
        file.attrs['pseudo_nyquist_freq'] = pnf  # N/2T
        file.attrs['n_points'] = n_points  # number of data points
        file.attrs['f_peak'] = f_peak
        file.attrs['threshold'] = threshold
        # the spectra
        file.create_dataset('freqs', data=freqs)
        file['freqs'].attrs['unit'] = 'inverse unit of the times'
        file['freqs'].attrs['description'] = 'frequency grid'
        file.create_dataset('dft_ampl', data=dft_ampl)
        file['dft_ampl'].attrs['unit'] = 'unit of the fluxes'
        file['dft_ampl'].attrs['description'] = 'modulus of the discrete Fourier transform'
        file.create_dataset('power', data=power)
        file['power'].attrs['unit'] = 'dimensionless'
        file['power'].attrs['description'] = 'normalised Lomb-Scargle power'
    return file_name


def read_results_hdf5(file_name, verbose=False):
    """Read the results of a light curve analysis from an hdf5 file.

    Parameters
    ----------
    file_name: str
        File name (including path) for loading the results.
    verbose: bool
        If set to True, this function will print some information.

    Returns
    -------
    results: dict
        Contains:
        grid_stats: list[float]
            delta_t, max_freq, pseudo_nyquist_freq, n_points
        freqs: numpy.ndarray[float]
            The frequency grid
        dft_ampl: numpy.ndarray[float]
            Modulus of the discrete Fourier transform
        power: numpy.ndarray[float]
            Lomb-Scargle periodogram
        f_peak: float
            Frequency of the highest periodogram peak
        threshold: None, float
            False alarm power threshold (None if it was not calculated)
        target_id: str
            Identifier of the light curve
        description: str
            Description of the saved results
    """
    with h5py.File(file_name, 'r') as file:
        identifier = file.attrs['identifier']
        target_id = file.attrs['target_id']
        description = file.attrs['description']
        date_time = file.attrs['date_time']
        grid_stats = [float(file.attrs['delta_t']), float(file.attrs['max_freq']),
                      float(file.attrs['pseudo_nyquist_freq']), int(file.attrs['n_points'])]
        f_peak = float(file.attrs['f_peak'])
        threshold = float(file.attrs['threshold'])
        freqs = np.copy(file['freqs'])
        dft_ampl = np.copy(file['dft_ampl'])
        power = np.copy(file['power'])
    if (threshold == -1):
        threshold = None
    results = {'grid_stats': grid_stats, 'freqs': freqs, 'dft_ampl': dft_ampl, 'power': power, 'f_peak': f_peak,
               'threshold': threshold, 'target_id': target_id, 'description': description}
    if verbose:
        print(f'Loaded analysis file with identifier: {identifier}, created on {date_time}. \n'
              f'target_id: {target_id}. Description: {description} \n')
    return results
