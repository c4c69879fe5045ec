import math
from concurrent import futures
from typing import Iterable, Optional, Tuple

import numpy as np

from ..constants import DEFAULTS
from ..error import DegenerateStatisticsError
from ..util import logger


class FragmentStats:
    """
    the fragment size distribution of a single library

    Attributes:
        median: the median of the sampled fragment sizes
        mean: the mean of the fragment sizes remaining after outlier removal
        stdev: the standard deviation of the fragment sizes remaining after outlier removal
        conc_min: the smallest concordant fragment size
        conc_max: the largest concordant fragment size
        sampled: the number of fragment sizes the statistics were computed from
        retained: the number of fragment sizes remaining after outlier removal
    """

    def __init__(self, median, mean, stdev, conc_min, conc_max, sampled, retained):
        self.median = median
        self.mean = mean
        self.stdev = stdev
        self.conc_min = conc_min
        self.conc_max = conc_max
        self.sampled = sampled
        self.retained = retained

    def __str__(self):
        return 'FragmentStats(median={0.median}, fragment_size={0.mean:.4}+/-{0.stdev:.4}, ' \
               'concordant=[{0.conc_min:.4}, {0.conc_max:.4}], retained={0.retained}/{0.sampled})'.format(self)


def median_index(count: int) -> int:
    """
    the index of the median in a sorted sample. For an even number of values this is the upper
    of the two middle values

    Example:
        >>> median_index(5)
        2
        >>> median_index(4)
        2
    """
    return count // 2


def split_outliers(sorted_sizes: np.ndarray, median: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    split sorted fragment sizes into those at most twice the median and those above it

    Returns:
        Tuple[np.ndarray, np.ndarray]: the retained and the excluded fragment sizes
    """
    cutoff = np.searchsorted(sorted_sizes, 2 * median, side='right')
    return sorted_sizes[:cutoff], sorted_sizes[cutoff:]


def concordant_window(
    mean: float, stdev: float, multiplier: Optional[int] = None
) -> Tuple[float, float]:
    """
    Returns:
        Tuple[float, float]: the min and max fragment size considered concordant. The min is never negative

    Example:
        >>> concordant_window(100.0, 30.0)
        (0.0, 220.0)
    """
    if multiplier is None:
        multiplier = DEFAULTS.concordant_stdev_multiplier
    conc_min = max(0.0, mean - multiplier * stdev)
    conc_max = mean + multiplier * stdev
    return conc_min, conc_max


def compute_fragment_stats(
    fragment_sizes: Iterable[int], multiplier: Optional[int] = None
) -> FragmentStats:
    """
    computes the median, the mean and stdev with outliers (above twice the median) removed, and the
    concordant window for a set of fragment sizes

    Args:
        fragment_sizes: the sampled fragment sizes
        multiplier: the number of standard deviations either side of the mean considered concordant

    Returns:
        FragmentStats: the computed statistics

    Raises:
        DegenerateStatisticsError: there are no fragment sizes left after outlier removal
    """
    sizes = np.sort(np.asarray(fragment_sizes, dtype=np.int64))
    if sizes.size == 0:
        raise DegenerateStatisticsError('no fragment sizes were sampled')
    median = int(sizes[median_index(sizes.size)])

    retained, _ = split_outliers(sizes, median)
    if retained.size == 0:
        raise DegenerateStatisticsError(
            'no fragment sizes remain after removing outliers', median, sizes.size
        )
    mean = int(retained.sum()) / retained.size
    variance = float(np.mean(np.square(retained - mean)))
    stdev = math.sqrt(variance)
    conc_min, conc_max = concordant_window(mean, stdev, multiplier)
    return FragmentStats(median, mean, stdev, conc_min, conc_max, int(sizes.size), int(retained.size))


def finalize_library(library, multiplier: Optional[int] = None):
    """
    compute and set the statistics for a library from its sampled fragment sizes. Libraries with
    degenerate statistics are marked invalid rather than raising

    Args:
        library (Library): the library to finalize
    """
    if library.read_lengths.size:
        library.read_length = int(np.median(library.read_lengths))
    try:
        library.set_stats(compute_fragment_stats(library.fragment_sizes, multiplier))
    except DegenerateStatisticsError as err:
        logger.warning(f'library {library.name} has degenerate fragment size statistics: {err}')
        library.invalidate_stats()
    return library


def compute_library_stats(
    libraries, threads: int = 1, multiplier: Optional[int] = None
):
    """
    finalize the statistics of every library. The libraries share no state so their statistics may
    be computed in parallel threads

    Args:
        libraries (Iterable[Library]): the sampled libraries
        threads: the maximum number of worker threads
    """
    libraries = list(libraries)
    if multiplier is None:
        multiplier = DEFAULTS.concordant_stdev_multiplier
    if threads <= 1 or len(libraries) <= 1:
        for library in libraries:
            finalize_library(library, multiplier)
        return libraries
    with futures.ThreadPoolExecutor(max_workers=threads) as pool:
        for response in [pool.submit(finalize_library, lib, multiplier) for lib in libraries]:
            response.result()
    return libraries
