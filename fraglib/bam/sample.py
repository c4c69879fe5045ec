"""
sampling of fragment sizes from a stream of alignment records
"""
from typing import Iterable

from ..library import LibraryRegistry
from ..util import logger


def is_eligible(record) -> bool:
    """
    checks if a record is the forward read of a pair with a positive insert size

    Args:
        record (AlignmentRecordView): the alignment record
    """
    return record.insert_size > 0 and not record.is_reverse_strand and record.mate_is_reverse_strand


class FragmentSampler:
    """
    Fills the fragment size buffer of each library from a single pass over an alignment record stream

    Attributes:
        records_read: number of records consumed from the stream
        records_eligible: number of records passing the orientation and insert size filter
        unresolved_read_group: eligible records dropped since their read group is not declared in the header
        library_full: eligible records dropped since their library had already been fully sampled
    """

    def __init__(self, registry: LibraryRegistry):
        self.registry = registry
        self.records_read = 0
        self.records_eligible = 0
        self.unresolved_read_group = 0
        self.library_full = 0
        self.unsatisfied = sum([1 for lib in registry if not lib.is_full()])

    def is_complete(self) -> bool:
        """
        True once every library has sampled its full capacity
        """
        return self.unsatisfied == 0

    def add_record(self, record) -> bool:
        """
        Args:
            record (AlignmentRecordView): the alignment record

        Returns:
            bool: True if the record insert size was added to a library sample
        """
        self.records_read += 1
        if not is_eligible(record):
            return False
        self.records_eligible += 1

        index = self.registry.resolve_read_group(record.read_group_tag)
        if index is None:
            self.unresolved_read_group += 1
            return False

        library = self.registry[index]
        if library.is_full():
            self.library_full += 1
            return False
        if library.add_fragment(record.insert_size, record.query_length):
            self.unsatisfied -= 1
            logger.debug(f'library {library.name} sampled {library.fragments_sampled} fragments')
        return True

    def sample(self, records: Iterable) -> LibraryRegistry:
        """
        consume records until the stream ends or every library is full. Errors raised by the
        stream itself are not handled here

        Args:
            records (Iterable[AlignmentRecordView]): the alignment record stream
        """
        if self.is_complete():
            return self.registry
        for record in records:
            self.add_record(record)
            if self.is_complete():
                break
        logger.info(
            f'read {self.records_read} records, {self.records_eligible} eligible for fragment size sampling'
        )
        logger.debug(
            f'dropped {self.unresolved_read_group} records with an undeclared read group and '
            f'{self.library_full} records for fully sampled libraries'
        )
        for library in self.registry:
            if not library.is_full():
                logger.info(
                    f'library {library.name} sampled {library.fragments_sampled} of {library.capacity} fragments'
                )
        return self.registry


def sample_fragments(registry: LibraryRegistry, records: Iterable) -> FragmentSampler:
    """
    sample fragment sizes for all libraries in the registry from the given record stream

    Returns:
        FragmentSampler: the sampler with its record counts
    """
    sampler = FragmentSampler(registry)
    sampler.sample(records)
    return sampler
