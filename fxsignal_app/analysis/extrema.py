"""Local peak and trough detection over numeric series"""

from typing import Sequence


def _validate_distance(min_distance: int) -> None:
    if min_distance < 1:
        raise ValueError(f"min_distance must be >= 1, got {min_distance}")


def find_peaks(data: Sequence[float], min_distance: int = 3) -> list[int]:
    """
    Find indices of strict local maxima

    An index qualifies when its value is strictly greater than every other
    value within ``min_distance`` positions on both sides. Indices closer
    than ``min_distance`` to either end are never candidates, and equal
    neighbours disqualify a point.

    Args:
        data: Ordered numeric series
        min_distance: Half-width of the comparison window

    Returns:
        Ascending list of peak indices, possibly empty
    """
    _validate_distance(min_distance)
    peaks = []

    for i in range(min_distance, len(data) - min_distance):
        value = data[i]
        window = range(i - min_distance, i + min_distance + 1)
        if all(data[j] < value for j in window if j != i):
            peaks.append(i)

    return peaks


def find_troughs(data: Sequence[float], min_distance: int = 3) -> list[int]:
    """
    Find indices of strict local minima

    Mirror of ``find_peaks``: every other value in the window must be
    strictly greater.

    Args:
        data: Ordered numeric series
        min_distance: Half-width of the comparison window

    Returns:
        Ascending list of trough indices, possibly empty
    """
    _validate_distance(min_distance)
    troughs = []

    for i in range(min_distance, len(data) - min_distance):
        value = data[i]
        window = range(i - min_distance, i + min_distance + 1)
        if all(data[j] > value for j in window if j != i):
            troughs.append(i)

    return troughs
