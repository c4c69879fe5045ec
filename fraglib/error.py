class MissingMetadataError(Exception):
    """
    raised when the alignment file header does not contain information required to
    profile the sample (the sample name, any read groups, or a read group identifier)
    """
    pass


class DecodeError(Exception):
    """
    raised when the alignment file cannot be opened, read or closed
    """
    pass


class LibraryNotFoundError(KeyError):
    pass


class DegenerateStatisticsError(Exception):
    """
    raised when there are no fragment sizes left to compute the mean and standard deviation from
    """
    pass
