"""
profiles the read groups of a sample: discovers the libraries from the header, samples their
fragment sizes and computes the fragment size statistics for each
"""
from typing import Dict, Iterable, List, Optional

from .bam.sample import sample_fragments
from .bam.source import BamRecordSource
from .bam.stats import compute_library_stats
from .constants import DEFAULTS
from .library import Sample
from .util import logger


def profile_sample(
    header_text: str,
    records: Iterable,
    sample_cap: Optional[int] = None,
    threads: Optional[int] = None,
    concordant_stdev_multiplier: Optional[int] = None,
) -> Sample:
    """
    Args:
        header_text: the text of the alignment file header
        records (Iterable[AlignmentRecordView]): the alignment record stream
        sample_cap: the maximum number of fragment sizes to sample per library (defaults to DEFAULTS.sample_cap)
        threads: the number of threads used to compute the per-library statistics
        concordant_stdev_multiplier: standard deviations from the mean considered concordant

    Returns:
        Sample: the sample with the statistics set for each of its libraries

    Raises:
        MissingMetadataError: the header has no sample name or does not declare any read groups
        DecodeError: the record stream could not be decoded
    """
    if sample_cap is None:
        sample_cap = DEFAULTS.sample_cap
    if threads is None:
        threads = DEFAULTS.threads
    if concordant_stdev_multiplier is None:
        concordant_stdev_multiplier = DEFAULTS.concordant_stdev_multiplier
    sample = Sample.from_header(header_text, capacity=sample_cap)
    logger.info(f'sample: {sample.name}')
    logger.info(f'libraries: {sample.num_libraries}')
    logger.debug(f'reference sequences: {sample.num_chrom}')

    sample_fragments(sample.registry, records)
    compute_library_stats(sample.libraries, threads=threads, multiplier=concordant_stdev_multiplier)

    for library in sample.libraries:
        if library.stats_valid:
            logger.info(
                f'library {library.name}: mean fragment size {library.frag_avg:.2f}, '
                f'stdev {library.frag_std:.2f}'
            )
        else:
            logger.info(f'library {library.name}: fragment size statistics unavailable')
    return sample


def profile_bam(bam_file: str, **kwargs) -> Sample:
    """
    profile the sample in an alignment file. See :func:`profile_sample` for the keyword arguments

    Raises:
        DecodeError: the file could not be opened, read or closed
    """
    logger.info(f'loading: {bam_file}')
    with BamRecordSource(bam_file) as source:
        sample = profile_sample(source.header_text(), source, **kwargs)
    return sample


def summarize(sample: Sample) -> List[Dict]:
    """
    Returns:
        List[Dict]: a finalized row per library with the name, fragment size statistics and concordant window
    """
    return sample.summary()
