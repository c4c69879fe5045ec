from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .constants import COLUMNS, DEFAULTS, is_aux_type_prefixed
from .error import LibraryNotFoundError, MissingMetadataError
from .header import count_libraries, parse_library_names, parse_references, parse_sample_name


class Library:
    """
    A single sequencing library (read group) and the fragment sizes sampled for it

    Attributes:
        name: the read group identifier
        index: position of the read group declaration in the header
        capacity: the maximum number of fragment sizes which may be sampled
        fragments_sampled: the number of fragment sizes actually sampled
        read_lengths_sampled: the number of sampled fragments for which the read length was known
    """

    def __init__(self, name: str, index: int, capacity: Optional[int] = None):
        if capacity is None:
            capacity = DEFAULTS.sample_cap
        if capacity < 1:
            raise ValueError('library sample capacity must be a positive integer', capacity)
        self.name = name
        self.index = index
        self.capacity = capacity
        self.fragments_sampled = 0
        self.read_lengths_sampled = 0
        self._fragment_sizes = np.zeros(capacity, dtype=np.int64)
        self._read_lengths = np.zeros(capacity, dtype=np.int32)

        self.frag_med: Optional[int] = None
        self.frag_avg: Optional[float] = None
        self.frag_std: Optional[float] = None
        self.conc_min: Optional[float] = None
        self.conc_max: Optional[float] = None
        self.read_length: Optional[int] = None
        self.stats_valid = False

    @property
    def fragment_sizes(self) -> np.ndarray:
        """
        the sampled fragment sizes (a read-only view over the filled portion of the buffer)
        """
        view = self._fragment_sizes[:self.fragments_sampled]
        view.flags.writeable = False
        return view

    @property
    def read_lengths(self) -> np.ndarray:
        view = self._read_lengths[:self.read_lengths_sampled]
        view.flags.writeable = False
        return view

    def is_full(self) -> bool:
        return self.fragments_sampled >= self.capacity

    def add_fragment(self, fragment_size: int, read_length: Optional[int] = None) -> bool:
        """
        Args:
            fragment_size: the insert size of the read pair
            read_length: the length of the sampled read (if known)

        Returns:
            bool: True if this fragment filled the last free slot of the buffer

        Raises:
            OverflowError: the buffer is already full
        """
        if self.is_full():
            raise OverflowError('library fragment sample is full', self.name, self.capacity)
        self._fragment_sizes[self.fragments_sampled] = fragment_size
        self.fragments_sampled += 1
        if read_length:
            self._read_lengths[self.read_lengths_sampled] = read_length
            self.read_lengths_sampled += 1
        return self.is_full()

    def set_stats(self, stats) -> None:
        """
        Args:
            stats (FragmentStats): the statistics computed from the sampled fragment sizes
        """
        self.frag_med = stats.median
        self.frag_avg = stats.mean
        self.frag_std = stats.stdev
        self.conc_min = stats.conc_min
        self.conc_max = stats.conc_max
        self.stats_valid = True

    def invalidate_stats(self) -> None:
        self.frag_med = None
        self.frag_avg = None
        self.frag_std = None
        self.conc_min = None
        self.conc_max = None
        self.stats_valid = False

    def flatten(self) -> Dict:
        return {
            COLUMNS.library: self.name,
            COLUMNS.library_index: self.index,
            COLUMNS.fragments_sampled: self.fragments_sampled,
            COLUMNS.read_length: self.read_length,
            COLUMNS.frag_med: self.frag_med,
            COLUMNS.frag_avg: self.frag_avg,
            COLUMNS.frag_std: self.frag_std,
            COLUMNS.conc_min: self.conc_min,
            COLUMNS.conc_max: self.conc_max,
            COLUMNS.stats_valid: self.stats_valid,
        }

    def __repr__(self):
        if not self.stats_valid:
            return f'Library({self.name}, index={self.index}, sampled={self.fragments_sampled})'
        return (
            f'Library({self.name}, index={self.index}, sampled={self.fragments_sampled}, '
            f'fragment_size={self.frag_avg:.4f}+/-{self.frag_std:.4f}, '
            f'concordant=[{self.conc_min:.4f}, {self.conc_max:.4f}])'
        )


class LibraryRegistry:
    """
    Assigns each read group an index in the order it is declared and resolves read group
    identifiers back to their library
    """

    def __init__(self, names: List[str], capacity: Optional[int] = None):
        self.libraries: List[Library] = []
        self._index_by_name: Dict[str, int] = {}
        for name in names:
            if name in self._index_by_name:
                raise ValueError('duplicate read group identifier', name)
            self._index_by_name[name] = len(self.libraries)
            self.libraries.append(Library(name, len(self.libraries), capacity=capacity))

    def size(self) -> int:
        return len(self.libraries)

    def __len__(self):
        return self.size()

    def __iter__(self) -> Iterator[Library]:
        return iter(self.libraries)

    def __getitem__(self, index: int) -> Library:
        return self.libraries[index]

    def find_index(self, name: str) -> int:
        """
        Raises:
            LibraryNotFoundError: there is no library with exactly this name
        """
        try:
            return self._index_by_name[name]
        except KeyError:
            raise LibraryNotFoundError('library is not declared in the header', name)

    def resolve_read_group(self, tag: Optional[str]) -> Optional[int]:
        """
        find the library index for the read group tag of an alignment record. Tags given in the raw
        form (prefixed by their one-character value type) are stripped of the type before matching

        Returns:
            Optional[int]: the library index or None if the tag does not match any library

        Example:
            >>> registry = LibraryRegistry(['lib1'])
            >>> registry.resolve_read_group('Zlib1')
            0
        """
        if not tag:
            return None
        index = self._index_by_name.get(tag)
        if index is None and is_aux_type_prefixed(tag):
            index = self._index_by_name.get(tag[1:])
        return index


class Sample:
    """
    The sample described by an alignment file header and the libraries sequenced from it
    """

    def __init__(
        self,
        name: str,
        library_names: List[str],
        references: Optional[List[Tuple[str, int]]] = None,
        capacity: Optional[int] = None,
    ):
        self.name = name
        self.registry = LibraryRegistry(library_names, capacity=capacity)
        self.references = references or []

    @classmethod
    def from_header(cls, header_text: str, capacity: Optional[int] = None) -> 'Sample':
        """
        build the sample and its libraries from the header text of an alignment file

        Raises:
            MissingMetadataError: the header has no sample name or does not declare any read groups
        """
        name = parse_sample_name(header_text)
        if count_libraries(header_text) == 0:
            raise MissingMetadataError('header does not declare any read groups', name)
        return cls(
            name,
            parse_library_names(header_text),
            references=parse_references(header_text),
            capacity=capacity,
        )

    @property
    def libraries(self) -> List[Library]:
        return self.registry.libraries

    @property
    def num_libraries(self) -> int:
        return self.registry.size()

    @property
    def num_chrom(self) -> int:
        return len(self.references)

    def summary(self) -> List[Dict]:
        """
        Returns:
            List[Dict]: a row per library with the fragment size statistics
        """
        rows = []
        for library in self.libraries:
            row = {COLUMNS.sample: self.name}
            row.update(library.flatten())
            rows.append(row)
        return rows
