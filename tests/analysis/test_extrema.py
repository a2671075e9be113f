"""Tests for peak and trough detection"""

import pytest

from fxsignal_app.analysis.extrema import find_peaks, find_troughs


class TestFindPeaks:
    """Test strict local maxima detection"""

    def test_single_peak(self):
        data = [1, 2, 3, 10, 3, 2, 1]
        assert find_peaks(data, min_distance=3) == [3]

    def test_multiple_peaks_ascending(self):
        data = [0, 1, 0, 1, 0, 1, 0]
        assert find_peaks(data, min_distance=1) == [1, 3, 5]

    def test_plateau_is_not_a_peak(self):
        """Equal neighbours disqualify both points"""
        data = [1, 2, 5, 5, 2, 1, 0]
        assert find_peaks(data, min_distance=2) == []

    def test_edges_are_never_candidates(self):
        data = [10, 1, 1, 1, 1, 1, 10]
        assert find_peaks(data, min_distance=3) == []

    def test_series_shorter_than_window(self):
        assert find_peaks([1, 5, 1], min_distance=3) == []
        assert find_peaks([], min_distance=3) == []

    def test_peak_must_dominate_whole_window(self):
        """A higher value within min_distance suppresses the smaller bump"""
        data = [1, 2, 3, 2, 4, 8, 4, 1, 0]
        assert find_peaks(data, min_distance=3) == [5]

    def test_invalid_distance(self):
        with pytest.raises(ValueError):
            find_peaks([1, 2, 3], min_distance=0)

    def test_results_respect_bounds(self):
        data = [((i * 7) % 11) for i in range(40)]
        d = 2
        for i in find_peaks(data, d):
            assert d <= i < len(data) - d
            assert all(data[j] < data[i] for j in range(i - d, i + d + 1) if j != i)


class TestFindTroughs:
    """Test strict local minima detection"""

    def test_single_trough(self):
        data = [5, 4, 3, -1, 3, 4, 5]
        assert find_troughs(data, min_distance=3) == [3]

    def test_flat_series_has_no_troughs(self):
        assert find_troughs([1.0] * 10, min_distance=2) == []

    def test_mirror_of_peaks(self):
        data = [3, 1, 4, 1, 5, 9, 2, 6, 5, 3, 5]
        negated = [-v for v in data]
        assert find_troughs(data, 1) == find_peaks(negated, 1)

    def test_invalid_distance(self):
        with pytest.raises(ValueError):
            find_troughs([1, 2, 3], min_distance=-1)
