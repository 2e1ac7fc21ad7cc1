"""TIMESCALES
Time series Analysis of Irregularly Measured Experiments:
Spectra, Characteristic frequencies And Light curve Statistics

This Python module contains the main functions that link together all functionality.

Code written by: Luc IJspeert
"""
import os
import time
import logging
import numpy as np
import functools as fct
import multiprocessing as mp

from . import grid_functions as gf
from . import timeseries_functions as tsf
from . import utility as ut


# initialize logger
logger = logging.getLogger(__name__)


def customize_logger(save_dir, target_id, verbose):
    """Create a custom logger for logging to file and to stdout

    Parameters
    ----------
    save_dir: str, None
        Folder to save the log file. If None, only logs to stdout (if verbose)
    target_id: int, str
        Identifier to use for the log file
    verbose: bool
        If set to True, information will be printed by the logger

    Returns
    -------
     : None
    """
    # customize the logger
    logger.setLevel(logging.INFO)  # set base activation level for logger
    # make formatters for the handlers
    s_format = logging.Formatter(fmt='%(asctime)s - %(levelname)s - %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
    f_format = logging.Formatter(fmt='%(asctime)s %(levelname)s %(module)s - %(funcName)s: %(message)s',
                                 datefmt='%Y-%m-%d %H:%M:%S')
    # remove existing handlers to avoid duplicate messages
    if (logger.hasHandlers()):
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
    # make stream handler
    if verbose:
        s_handler = logging.StreamHandler()  # for printing
        s_handler.setLevel(logging.INFO)  # print everything with level 20 or above
        s_handler.setFormatter(s_format)
        logger.addHandler(s_handler)
    # file handler
    if save_dir is not None:
        logname = os.path.join(save_dir, f'{target_id}.log')
        f_handler = logging.FileHandler(logname, mode='a')  # for saving
        f_handler.setLevel(logging.INFO)  # save everything with level 20 or above
        f_handler.setFormatter(f_format)
        logger.addHandler(f_handler)
    return None


def characterise_sampling(times):
    """Statistics of the sampling of a time series

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order

    Returns
    -------
    grid_stats: list[float]
        delta_t, max_freq, pseudo_nyquist_freq, n_points
    """
    t_tot = gf.delta_t(times)
    f_max = gf.max_freq(times)
    pnf = gf.pseudo_nyquist_freq(times)
    grid_stats = [t_tot, f_max, pnf, len(times)]
    return grid_stats


def analyse_light_curve(times, fluxes, target_id, save_dir=None, f_min=None, f_max=None, f_step=None, fap=0.01,
                        n_sims=0, seed=None, overwrite=False, verbose=False):
    """Characterise the sampling and compute the spectra of a light curve

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order
    fluxes: numpy.ndarray[float]
        Measurement values of the time series
    target_id: int, str
        Identifier of the light curve, used for the file names.
    save_dir: str, None
        Path to a directory for saving the results (and the log). Also used
        to load previous analysis results. If None, nothing is saved.
    f_min: float, None
        Lowest frequency of the grid, see freq_gen for the default
    f_max: float, None
        Highest frequency of the grid, see freq_gen for the default
    f_step: float, None
        Frequency step of the grid, see freq_gen for the default
    fap: float
        False alarm probability for the periodogram threshold
    n_sims: int
        Number of white noise simulations for the threshold.
        If zero, no threshold is calculated.
    seed: None, int
        Seed for the white noise simulations
    overwrite: bool
        If set to True, overwrite old results in save_dir,
        or (if False) load them if found.
    verbose: bool
        If set to True, this function will print some information

    Returns
    -------
    results: dict
        Contains grid_stats, freqs, dft_ampl, power, f_peak, threshold,
        target_id and description, see read_results_hdf5

    Notes
    -----
    Input problems are raised as errors from the timescales.exceptions
    module, before anything is saved.
    """
    t_a = time.time()
    customize_logger(save_dir, target_id, verbose)  # log stuff to a file and/or stdout
    file_name = None
    if save_dir is not None:
        file_name = os.path.join(save_dir, f'{target_id}_timescales.hdf5')
    # guard for existing file when not overwriting
    if (file_name is not None) and os.path.isfile(file_name) and (not overwrite):
        logger.info(f'Loading existing results from {file_name}')
        return ut.read_results_hdf5(file_name, verbose=verbose)
    logger.info('Start of analysis')
    # sampling characteristics
    grid_stats = characterise_sampling(times)
    t_tot, f_nyq, pnf, n_points = grid_stats
    logger.info(f'{n_points} data points over a time base of {t_tot:1.4f}. Maximum frequency: {f_nyq:1.4f}, '
                f'pseudo-Nyquist frequency: {pnf:1.4f}.')
    freqs = gf.freq_gen(times, f_min=f_min, f_max=f_max, f_step=f_step)
    logger.info(f'Frequency grid of {len(freqs)} points from {freqs[0]:1.4f} to {freqs[-1]:1.4f}.')
    # spectra
    dft_ampl = np.abs(tsf.dft(times, fluxes, freqs))
    power = tsf.lomb_scargle(times, fluxes, freqs)
    f_peak = float(freqs[np.argmax(power)])
    logger.info(f'Highest periodogram peak at frequency {f_peak:1.6f} with power {np.max(power):1.2f}.')
    # significance
    threshold = None
    if (n_sims > 0):
        threshold = tsf.ls_threshold(times, freqs, fap, n_sims=n_sims, seed=seed, verbose=verbose)
        logger.info(f'Power threshold for a false alarm probability of {fap}: {threshold:1.2f}.')
    results = {'grid_stats': grid_stats, 'freqs': freqs, 'dft_ampl': dft_ampl, 'power': power, 'f_peak': f_peak,
               'threshold': threshold, 'target_id': str(target_id), 'description': 'Irregular DFT and periodogram.'}
    if file_name is not None:
        ut.save_results_hdf5(file_name, grid_stats, freqs, dft_ampl, power, f_peak, threshold=threshold,
                             target_id=target_id, description=results['description'])
    t_b = time.time()
    logger.info(f'End of analysis. Total time elapsed: {t_b - t_a:1.1f}s.')
    return results


def analyse_lc_from_file(file_name, f_min=None, f_max=None, f_step=None, fap=0.01, n_sims=0, seed=None,
                         overwrite=False, verbose=False):
    """Do all steps of the analysis for a given light curve file

    Parameters
    ----------
    file_name: str
        Path to a file containing the light curve data, with
        timestamps and flux as the first two columns
    f_min: float, None
        Lowest frequency of the grid, see freq_gen for the default
    f_max: float, None
        Highest frequency of the grid, see freq_gen for the default
    f_step: float, None
        Frequency step of the grid, see freq_gen for the default
    fap: float
        False alarm probability for the periodogram threshold
    n_sims: int
        Number of white noise simulations for the threshold (zero for none)
    seed: None, int
        Seed for the white noise simulations
    overwrite: bool
        If set to True, overwrite old results in the same directory
    verbose: bool
        If set to True, this function will print some information

    Returns
    -------
    results: dict
        See analyse_light_curve

    Notes
    -----
    Results are saved in the same directory as the given file.

    The input text files are expected to have two columns with in order:
    times, fluxes. The timestamps should be in ascending order.
    The expected text file format is space separated.
    """
    target_id = os.path.splitext(os.path.basename(file_name))[0]  # file name is used as target identifier
    save_dir = os.path.dirname(os.path.abspath(file_name))
    # load the data
    times, fluxes = ut.load_light_curve(file_name)
    # do the analysis
    results = analyse_light_curve(times, fluxes, target_id, save_dir=save_dir, f_min=f_min, f_max=f_max,
                                  f_step=f_step, fap=fap, n_sims=n_sims, seed=seed, overwrite=overwrite,
                                  verbose=verbose)
    return results


def analyse_set(file_list, n_threads=max((os.cpu_count() or 1) - 2, 1), **kwargs):
    """Analyse a set of light curve files in parallel

    Parameters
    ----------
    file_list: list[str]
        List of file names to analyse
    n_threads: int
        Number of threads to use.
        Uses two fewer than the available amount by default.
    **kwargs: dict
        Extra arguments to analyse_lc_from_file

    Returns
    -------
    results: list[dict]
        The results for each file, in the order of file_list
    """
    t1 = time.time()
    with mp.Pool(processes=n_threads) as pool:
        results = pool.map(fct.partial(analyse_lc_from_file, **kwargs), file_list, chunksize=1)
    t2 = time.time()
    print(f'Finished analysing set in: {(t2 - t1):1.2} s ({(t2 - t1) / 3600:1.2} h) for {len(file_list)} targets,\n'
          f'using {n_threads} threads ({(t2 - t1) * n_threads / len(file_list):1.2} s '
          f'average per target single threaded).')
    return results
