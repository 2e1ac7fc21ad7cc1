"""TIMESCALES
Time series Analysis of Irregularly Measured Experiments:
Spectra, Characteristic frequencies And Light curve Statistics

This Python module contains functions for visualisation;
specifically for visualising the spectra and pair statistics of light curves.

Code written by: Luc IJspeert
"""

import numpy as np
import matplotlib.pyplot as plt

from . import timeseries_functions as tsf


def plot_periodogram(freqs, power, threshold=None, f_peak=None, save_file=None, show=True):
    """Plot a periodogram, optionally with its significance threshold.

    Parameters
    ----------
    freqs: numpy.ndarray[float]
        Frequencies at which the periodogram was calculated
    power: numpy.ndarray[float]
        The periodogram (or DFT amplitude) at each frequency
    threshold: float, optional
        Power threshold for a given false alarm probability
    f_peak: float, optional
        Frequency to mark in the plot
    save_file: str, optional
        File path to save the plot
    show: bool, optional
        If True, display the plot

    Returns
    -------
    None
    """
    fig, ax = plt.subplots()
    ax.plot(freqs, power, c='tab:blue', lw=1, label='periodogram')
    if threshold is not None:
        ax.axhline(threshold, c='tab:orange', ls='--', label='threshold')
    if f_peak is not None:
        ax.axvline(f_peak, c='tab:red', ls=':', alpha=0.7, label=f'f = {f_peak:1.4f}')
    ax.set_xlim(freqs[0], freqs[-1])
    ax.set_xlabel('frequency (1/time unit)')
    ax.set_ylabel('power')
    ax.legend()
    plt.tight_layout()
    if save_file is not None:
        fig.savefig(save_file, dpi=120, format='png')  # 16 by 9 at 120 dpi is 1080p
    if show:
        plt.show()
    else:
        plt.close()
    return None


def plot_dmdt(times, fluxes, bin_edges=None, q=0.9, save_file=None, show=True):
    """Plot the delta-m delta-t diagram of a light curve with a binned quantile.

    Parameters
    ----------
    times: numpy.ndarray[float]
        Timestamps of the time series, in ascending order
    fluxes: numpy.ndarray[float]
        Measurement values of the time series
    bin_edges: numpy.ndarray[float], optional
        Edges of the delta_t bins for the quantile line.
        By default 20 logarithmically spaced bins.
    q: float
        The quantile to draw per bin
    save_file: str, optional
        File path to save the plot
    show: bool, optional
        If True, display the plot

    Returns
    -------
    None
    """
    delta_t, delta_m = tsf.dmdt(times, fluxes)
    positive = (delta_t > 0)
    if bin_edges is None:
        bin_edges = np.geomspace(np.min(delta_t[positive]), np.max(delta_t), 21)
    quants = tsf.delta_m_bin_quantile(delta_t, delta_m, bin_edges, q)
    bin_mid = np.sqrt(bin_edges[1:] * bin_edges[:-1])
    fig, ax = plt.subplots()
    ax.scatter(delta_t[positive], delta_m[positive], marker='.', s=2, c='tab:grey', alpha=0.3, label='pairs')
    ax.step(bin_mid, quants, where='mid', c='tab:red', label=f'{q} quantile')
    ax.set_xscale('log')
    ax.set_xlabel(r'$\Delta t$')
    ax.set_ylabel(r'$\Delta m$')
    ax.legend()
    plt.tight_layout()
    if save_file is not None:
        fig.savefig(save_file, dpi=120, format='png')
    if show:
        plt.show()
    else:
        plt.close()
    return None
