import unittest
import numpy as np

from timescales import timeseries_functions as tsf
from timescales import grid_functions as gf
from timescales.exceptions import (TimescalesError, InvalidArgumentError, BadLightCurveError, NotSortedError,
                                   NegativeFrequencyError)


class TestDFT(unittest.TestCase):
    def setUp(self):
        """Setup common test inputs before each test."""
        self.times = np.arange(100, dtype=float)
        self.f_0 = 0.1
        self.ampl = 2.5
        self.fluxes = self.ampl * np.sin(2 * np.pi * self.f_0 * self.times)

    def test_two_points(self):
        """Two unit fluxes at t=0 and t=1, at f=1: exp(0) + exp(-2 pi i) = 2."""
        ft = tsf.dft([0.0, 1.0], [1.0, 1.0], [1.0])
        self.assertEqual(len(ft), 1)
        self.assertAlmostEqual(ft[0].real, 2.0, places=12)
        self.assertAlmostEqual(ft[0].imag, 0.0, places=12)

    def test_sinusoid_amplitude(self):
        """An injected sinusoid gives |F| = N A / 2 at its frequency and ~0 elsewhere."""
        ft = tsf.dft(self.times, self.fluxes, [self.f_0, 0.3])
        self.assertAlmostEqual(np.abs(ft[0]), len(self.times) * self.ampl / 2, places=8)
        self.assertLess(np.abs(ft[1]), 1e-8)

    def test_order_of_output(self):
        """Output follows the order of the frequency grid, no ordering needed."""
        freqs = np.array([0.3, 0.1, 0.2])
        ft = tsf.dft(self.times, self.fluxes, freqs)
        ft_single = [tsf.dft(self.times, self.fluxes, [f])[0] for f in freqs]
        np.testing.assert_array_equal(ft, ft_single)

    def test_matches_numpy_sum(self):
        """Irregular sampling against a direct numpy evaluation."""
        rng = np.random.default_rng(7)
        times = np.sort(rng.uniform(0, 30, 57))
        fluxes = rng.normal(size=57)
        freqs = np.linspace(0.01, 3, 40)
        expected = np.sum(fluxes * np.exp(-2j * np.pi * freqs[:, np.newaxis] * times), axis=1)
        np.testing.assert_allclose(tsf.dft(times, fluxes, freqs), expected, rtol=1e-9, atol=1e-9)

    def test_idempotent(self):
        """Two calls with the same input give bit-identical output."""
        rng = np.random.default_rng(3)
        times = np.sort(rng.uniform(0, 10, 40))
        fluxes = rng.normal(size=40)
        freqs = gf.freq_gen(times)
        np.testing.assert_array_equal(tsf.dft(times, fluxes, freqs), tsf.dft(times, fluxes, freqs))

    def test_scalar_frequency(self):
        """A single frequency given as a number is a grid of length one."""
        ft = tsf.dft([0.0, 1.0], [1.0, 1.0], 1.0)
        self.assertEqual(len(ft), 1)
        self.assertAlmostEqual(ft[0].real, 2.0, places=12)
        with self.assertRaises(InvalidArgumentError):
            tsf.dft([0.0, 1.0], [1.0, 1.0], [[0.5, 1.0]])
        with self.assertRaises(BadLightCurveError):
            tsf.dft(1.0, 1.0, 1.0)

    def test_output_length(self):
        """One value per frequency, an empty grid gives an empty spectrum."""
        self.assertEqual(len(tsf.dft(self.times, self.fluxes, np.linspace(0.01, 0.5, 17))), 17)
        self.assertEqual(len(tsf.dft(self.times, self.fluxes, [])), 0)

    def test_one_unique_time(self):
        """All times equal (or too few) is a degenerate light curve."""
        with self.assertRaises(BadLightCurveError):
            tsf.dft([1.0, 1.0, 1.0], [1.0, 2.0, 3.0], [0.5])
        with self.assertRaises(BadLightCurveError):
            tsf.dft([1.0], [1.0], [0.5])
        with self.assertRaises(BadLightCurveError):
            tsf.dft([], [], [0.5])

    def test_unsorted(self):
        """An inversion in times is reported as not sorted."""
        with self.assertRaises(NotSortedError):
            tsf.dft([0.0, 2.0, 1.0], [1.0, 1.0, 1.0], [0.5])

    def test_length_mismatch(self):
        """Different lengths is an invalid argument, message names both lengths."""
        with self.assertRaises(InvalidArgumentError) as cm:
            tsf.dft([0.0, 1.0, 2.0], [1.0, 1.0], [0.5])
        self.assertIn('3', str(cm.exception))
        self.assertIn('2', str(cm.exception))

    def test_negative_frequency(self):
        """A non-positive frequency is refused, the arguments stay the same."""
        times = [0.0, 1.0, 2.0]
        fluxes = [1.0, 0.0, 1.0]
        freqs = np.array([0.1, -0.2, 0.3])
        with self.assertRaises(NegativeFrequencyError):
            tsf.dft(times, fluxes, freqs)
        self.assertEqual(times, [0.0, 1.0, 2.0])
        self.assertEqual(fluxes, [1.0, 0.0, 1.0])
        np.testing.assert_array_equal(freqs, [0.1, -0.2, 0.3])
        with self.assertRaises(NegativeFrequencyError):
            tsf.dft(times, fluxes, [0.0])
        with self.assertRaises(NegativeFrequencyError):
            tsf.dft(times, fluxes, [np.nan])

    def test_check_order(self):
        """The first failing check wins: unique values, order, length, frequency."""
        with self.assertRaises(BadLightCurveError):
            tsf.dft([2.0, 2.0], [1.0], [-1.0])
        with self.assertRaises(NotSortedError):
            tsf.dft([2.0, 1.0], [1.0], [-1.0])
        with self.assertRaises(InvalidArgumentError):
            tsf.dft([1.0, 2.0], [1.0], [-1.0])

    def test_error_family(self):
        """All errors share a base class, which is a ValueError."""
        with self.assertRaises(TimescalesError):
            tsf.dft([0.0, 1.0], [1.0, 1.0], [-1.0])
        with self.assertRaises(ValueError):
            tsf.dft([1.0, 0.0], [1.0, 1.0], [1.0])
        self.assertEqual(NegativeFrequencyError.kind, 'negative-frequency')
        self.assertEqual(BadLightCurveError.kind, 'degenerate-light-curve')


class TestSpectralWindow(unittest.TestCase):
    def test_low_frequency_limit(self):
        """The window is one at frequency zero and at most one elsewhere."""
        rng = np.random.default_rng(11)
        times = np.sort(rng.uniform(0, 50, 80))
        spec_win = tsf.spectral_window(times, np.array([1e-9, 0.1, 0.37, 2.0]))
        self.assertAlmostEqual(spec_win[0], 1.0, places=8)
        self.assertTrue(np.all(spec_win <= 1 + 1e-12))

    def test_regular_sampling(self):
        """On a regular grid the window vanishes at multiples of 1/(N dt) and is one at 1/dt."""
        times = np.arange(20, dtype=float)
        spec_win = tsf.spectral_window(times, np.array([0.05, 1.0]))
        self.assertLess(spec_win[0], 1e-20)
        self.assertAlmostEqual(spec_win[1], 1.0, places=10)


class TestLombScargle(unittest.TestCase):
    def setUp(self):
        """Setup common test inputs before each test."""
        rng = np.random.default_rng(2024)
        self.times = np.sort(rng.uniform(0, 100, 300))
        self.f_0 = 0.237
        self.fluxes = 1.3 * np.sin(2 * np.pi * self.f_0 * self.times + 0.4) + rng.normal(0, 0.2, 300)
        self.freqs = gf.freq_gen(self.times)

    def test_peak_at_injected_frequency(self):
        """The highest peak is within a frequency resolution of the signal."""
        power = tsf.lomb_scargle(self.times, self.fluxes, self.freqs)
        f_peak = self.freqs[np.argmax(power)]
        self.assertLess(abs(f_peak - self.f_0), 1 / gf.delta_t(self.times))
        self.assertTrue(np.all(power >= 0))

    def test_matches_astropy(self):
        """Same normalisation as the exact astropy implementation."""
        power = tsf.lomb_scargle(self.times, self.fluxes, self.freqs)
        power_apy = tsf.astropy_lomb_scargle(self.times, self.fluxes, self.freqs, method='slow')
        np.testing.assert_allclose(power, power_apy, rtol=1e-6, atol=1e-8)

    def test_shift_invariant(self):
        """A shift in time or flux does not change the periodogram."""
        power = tsf.lomb_scargle(self.times, self.fluxes, self.freqs)
        power_shift = tsf.lomb_scargle(self.times + 1000, self.fluxes + 5, self.freqs)
        np.testing.assert_allclose(power, power_shift, rtol=1e-6, atol=1e-8)

    def test_regular_nyquist(self):
        """At the Nyquist frequency of a regular grid the power stays finite."""
        times = np.arange(50, dtype=float)
        fluxes = np.cos(np.pi * times)
        power = tsf.lomb_scargle(times, fluxes, [0.5])
        self.assertTrue(np.isfinite(power[0]))

    def test_errors(self):
        """Same checks as dft, and a constant flux is degenerate."""
        with self.assertRaises(NotSortedError):
            tsf.lomb_scargle([1.0, 0.0, 2.0], [1.0, 2.0, 3.0], [0.1])
        with self.assertRaises(InvalidArgumentError):
            tsf.lomb_scargle([0.0, 1.0, 2.0], [1.0, 2.0], [0.1])
        with self.assertRaises(NegativeFrequencyError):
            tsf.lomb_scargle([0.0, 1.0, 2.0], [1.0, 2.0, 3.0], [-0.1])
        with self.assertRaises(BadLightCurveError):
            tsf.lomb_scargle([0.0, 1.0, 2.0], [1.0, 1.0, 1.0], [0.1])


class TestLombScargleThreshold(unittest.TestCase):
    def setUp(self):
        """Setup common test inputs before each test."""
        rng = np.random.default_rng(5)
        self.times = np.sort(rng.uniform(0, 20, 60))
        self.freqs = gf.freq_gen(self.times, f_step=0.05)

    def test_edf(self):
        """Sorted peak powers with probabilities (i+1)/n_sims."""
        powers, probs = tsf.ls_normal_edf(self.times, self.freqs, n_sims=50, seed=1)
        self.assertEqual(len(powers), 50)
        self.assertTrue(np.all(np.diff(powers) >= 0))
        np.testing.assert_allclose(probs, np.arange(1, 51) / 50)
        self.assertTrue(np.all(powers > 0))

    def test_reproducible(self):
        """The same seed gives the same distribution."""
        powers_1, _ = tsf.ls_normal_edf(self.times, self.freqs, n_sims=20, seed=9)
        powers_2, _ = tsf.ls_normal_edf(self.times, self.freqs, n_sims=20, seed=9)
        np.testing.assert_array_equal(powers_1, powers_2)

    def test_threshold_monotonic(self):
        """A lower false alarm probability gives a higher threshold."""
        thr_1 = tsf.ls_threshold(self.times, self.freqs, 0.5, n_sims=100, seed=3)
        thr_2 = tsf.ls_threshold(self.times, self.freqs, 0.01, n_sims=100, seed=3)
        self.assertGreater(thr_2, thr_1)

    def test_errors(self):
        """Bad probability or number of simulations is an invalid argument."""
        with self.assertRaises(InvalidArgumentError):
            tsf.ls_threshold(self.times, self.freqs, 0.0, n_sims=10)
        with self.assertRaises(InvalidArgumentError):
            tsf.ls_threshold(self.times, self.freqs, 1.5, n_sims=10)
        with self.assertRaises(InvalidArgumentError):
            tsf.ls_normal_edf(self.times, self.freqs, n_sims=0)
        with self.assertRaises(NegativeFrequencyError):
            tsf.ls_normal_edf(self.times, -self.freqs, n_sims=10)


class TestAutoCorr(unittest.TestCase):
    def setUp(self):
        """Setup common test inputs before each test."""
        self.times = np.arange(100, dtype=float)
        self.fluxes = np.sin(2 * np.pi * 0.1 * self.times)
        self.offsets = np.arange(21, dtype=float)

    def test_zero_lag(self):
        """Normalised to one at lag zero, bounded by one elsewhere."""
        acf = tsf.auto_corr(self.times, self.fluxes, self.offsets)
        self.assertEqual(len(acf), len(self.offsets))
        self.assertAlmostEqual(acf[0], 1.0, places=12)
        self.assertTrue(np.all(np.abs(acf) <= 1 + 1e-12))

    def test_sinusoid_period(self):
        """A sinusoid correlates at its period and anticorrelates at half of it."""
        acf = tsf.auto_corr(self.times, self.fluxes, self.offsets)
        self.assertGreater(acf[10], 0.5)
        self.assertLess(acf[5], -0.5)

    def test_offset_independent(self):
        """Adding a constant to the fluxes changes nothing."""
        acf = tsf.auto_corr(self.times, self.fluxes, self.offsets)
        acf_shift = tsf.auto_corr(self.times, self.fluxes + 3, self.offsets)
        np.testing.assert_allclose(acf, acf_shift, rtol=1e-8, atol=1e-10)

    def test_max_freq(self):
        """A lower frequency limit still gives one value per lag."""
        acf = tsf.auto_corr(self.times, self.fluxes, self.offsets, max_freq=0.2)
        self.assertEqual(len(acf), len(self.offsets))
        self.assertAlmostEqual(acf[0], 1.0, places=12)
        with self.assertRaises(InvalidArgumentError):
            tsf.auto_corr(self.times, self.fluxes, self.offsets, max_freq=1e-5)

    def test_window(self):
        """The window function is one at lag zero and at most one elsewhere."""
        rng = np.random.default_rng(23)
        times = np.sort(rng.uniform(0, 50, 70))
        wf = tsf.ac_window(times, self.offsets)
        self.assertEqual(len(wf), len(self.offsets))
        self.assertAlmostEqual(wf[0], 1.0, places=12)
        self.assertTrue(np.all(np.abs(wf) <= 1 + 1e-12))
        wf_short = tsf.ac_window(times, self.offsets, max_freq=0.3)
        self.assertAlmostEqual(wf_short[0], 1.0, places=12)

    def test_lag_grid(self):
        """The lags must be an even, increasing grid of at least two values."""
        with self.assertRaises(InvalidArgumentError):
            tsf.auto_corr(self.times, self.fluxes, [0.0, 1.0, 3.0])
        with self.assertRaises(InvalidArgumentError):
            tsf.ac_window(self.times, [0.0, 1.0, 3.0])
        with self.assertRaises(InvalidArgumentError):
            tsf.auto_corr(self.times, self.fluxes, [1.0])
        with self.assertRaises(NotSortedError):
            tsf.auto_corr(self.times, self.fluxes, [2.0, 1.0, 0.0])

    def test_light_curve_errors(self):
        """The light curve is checked as for dft, a constant flux is degenerate."""
        with self.assertRaises(NotSortedError):
            tsf.auto_corr(self.times[::-1], self.fluxes, self.offsets)
        with self.assertRaises(InvalidArgumentError):
            tsf.auto_corr(self.times, self.fluxes[:-1], self.offsets)
        with self.assertRaises(BadLightCurveError):
            tsf.auto_corr(self.times, np.ones(100), self.offsets)
        with self.assertRaises(BadLightCurveError):
            tsf.ac_window([1.0, 1.0], self.offsets)


class TestDmdt(unittest.TestCase):
    def setUp(self):
        """Setup common test inputs before each test."""
        self.times = np.array([0.0, 1.0, 3.0, 7.0])
        self.fluxes = np.array([10.0, 11.0, 9.0, 12.0])

    def test_pairs(self):
        """All N(N-1)/2 pairs, sorted by time difference."""
        delta_t, delta_m = tsf.dmdt(self.times, self.fluxes)
        np.testing.assert_array_equal(delta_t, [1.0, 2.0, 3.0, 4.0, 6.0, 7.0])
        np.testing.assert_array_equal(delta_m, [1.0, -2.0, -1.0, 3.0, 1.0, 2.0])

    def test_errors(self):
        """Too short, mismatched or unsorted input is refused."""
        with self.assertRaises(InvalidArgumentError):
            tsf.dmdt([1.0], [1.0])
        with self.assertRaises(InvalidArgumentError):
            tsf.dmdt([1.0, 2.0], [1.0])
        with self.assertRaises(NotSortedError):
            tsf.dmdt([2.0, 1.0], [1.0, 1.0])

    def test_hi_amp_bin_frac(self):
        """Fraction of pairs above threshold per bin, NaN for empty bins."""
        delta_t, delta_m = tsf.dmdt(self.times, self.fluxes)
        fracs = tsf.hi_amp_bin_frac(delta_t, delta_m, [0.0, 2.5, 5.0, 5.5, 10.0], 1.0)
        np.testing.assert_allclose(fracs[[0, 1, 3]], [0.5, 0.5, 1.0])
        self.assertTrue(np.isnan(fracs[2]))

    def test_delta_m_bin_quantile(self):
        """Quantile of delta_m per bin, NaN for empty bins."""
        delta_t, delta_m = tsf.dmdt(self.times, self.fluxes)
        quants = tsf.delta_m_bin_quantile(delta_t, delta_m, [0.0, 2.5, 5.0, 5.5, 10.0], 0.5)
        np.testing.assert_allclose(quants[[0, 1, 3]], [-0.5, 1.0, 1.5])
        self.assertTrue(np.isnan(quants[2]))
        # the right edge of the last bin is included
        quants = tsf.delta_m_bin_quantile(delta_t, delta_m, [6.0, 7.0], 1.0)
        np.testing.assert_allclose(quants, [2.0])

    def test_quantile_matches_masks(self):
        """Per-bin quantiles equal a direct selection of each bin."""
        rng = np.random.default_rng(19)
        delta_t = np.sort(rng.uniform(0, 10, 500))
        delta_m = rng.normal(size=500)
        bin_edges = np.array([0.0, 1.0, 2.5, 6.0, 10.0])
        quants = tsf.delta_m_bin_quantile(delta_t, delta_m, bin_edges, 0.9)
        expected = [np.quantile(delta_m[(delta_t >= bin_edges[k]) & (delta_t < bin_edges[k + 1])], 0.9)
                    for k in range(4)]
        np.testing.assert_allclose(quants, expected)

    def test_no_pairs(self):
        """Without pairs every bin is empty."""
        quants = tsf.delta_m_bin_quantile([], [], [0.0, 1.0, 2.0], 0.5)
        self.assertTrue(np.all(np.isnan(quants)))
        self.assertEqual(len(quants), 2)

    def test_bin_errors(self):
        """Bad bins or quantiles are refused."""
        delta_t, delta_m = tsf.dmdt(self.times, self.fluxes)
        with self.assertRaises(NotSortedError):
            tsf.hi_amp_bin_frac(delta_t, delta_m, [0.0, 5.0, 5.0], 1.0)
        with self.assertRaises(InvalidArgumentError):
            tsf.hi_amp_bin_frac(delta_t, delta_m, [0.0], 1.0)
        with self.assertRaises(InvalidArgumentError):
            tsf.hi_amp_bin_frac(delta_t, delta_m[:-1], [0.0, 1.0], 1.0)
        with self.assertRaises(InvalidArgumentError):
            tsf.delta_m_bin_quantile(delta_t, delta_m, [0.0, 10.0], 1.5)


if __name__ == '__main__':
    unittest.main()
