import atexit
from typing import Iterator, Optional

import pysam

from ..constants import READ_GROUP_TAG
from ..error import DecodeError
from ..util import logger


class AlignmentRecordView:
    """
    the read-only portion of an alignment record used in sampling fragment sizes
    """

    __slots__ = ('insert_size', 'is_reverse_strand', 'mate_is_reverse_strand', 'read_group_tag', 'query_length')

    def __init__(
        self,
        insert_size: int,
        is_reverse_strand: bool = False,
        mate_is_reverse_strand: bool = True,
        read_group_tag: Optional[str] = None,
        query_length: Optional[int] = None,
    ):
        self.insert_size = insert_size
        self.is_reverse_strand = is_reverse_strand
        self.mate_is_reverse_strand = mate_is_reverse_strand
        self.read_group_tag = read_group_tag
        self.query_length = query_length

    @classmethod
    def from_read(cls, read: pysam.AlignedSegment) -> 'AlignmentRecordView':
        """
        Args:
            read: the record as decoded by pysam
        """
        read_group = read.get_tag(READ_GROUP_TAG) if read.has_tag(READ_GROUP_TAG) else None
        return cls(
            read.template_length,
            is_reverse_strand=read.is_reverse,
            mate_is_reverse_strand=read.mate_is_reverse,
            read_group_tag=None if read_group is None else str(read_group),
            query_length=read.query_length or None,
        )

    def __repr__(self):
        return 'AlignmentRecordView(insert_size={}, reverse={}, mate_reverse={}, read_group={})'.format(
            self.insert_size, self.is_reverse_strand, self.mate_is_reverse_strand, self.read_group_tag
        )


class BamRecordSource:
    """
    one-shot, forward-only stream of records from an alignment file (SAM/BAM/CRAM)
    """

    def __init__(self, bamfile):
        """
        Args:
            bamfile (str): path to the input alignment file

        Raises:
            DecodeError: the file could not be opened or its header could not be read
        """
        self.path = bamfile
        try:
            self.fh = pysam.AlignmentFile(bamfile, 'r', check_sq=False)
        except (OSError, ValueError) as err:
            raise DecodeError('unable to open the alignment file', bamfile, str(err))
        self._consumed = False
        atexit.register(self.close)  # makes the file 'auto close' on normal python exit

    def header_text(self) -> str:
        return str(self.fh.header)

    def __iter__(self) -> Iterator[AlignmentRecordView]:
        if self._consumed:
            raise RuntimeError('the alignment record stream can only be read once', self.path)
        self._consumed = True
        return self._records()

    def _records(self) -> Iterator[AlignmentRecordView]:
        reads = self.fh.fetch(until_eof=True)
        while True:
            try:
                read = next(reads)
            except StopIteration:
                return
            except (OSError, ValueError) as err:
                raise DecodeError('error decoding the alignment file', self.path, str(err))
            yield AlignmentRecordView.from_read(read)

    def close(self):
        """
        close the alignment file handle

        Raises:
            DecodeError: the file handle reported an error on closing
        """
        if self.fh is None:
            return
        fh, self.fh = self.fh, None
        atexit.unregister(self.close)
        try:
            fh.close()
        except OSError as err:
            raise DecodeError('error closing the alignment file', self.path, str(err))
        logger.debug(f'closed: {self.path}')

    def __enter__(self):
        return self

    def __exit__(self, *pos):
        self.close()
