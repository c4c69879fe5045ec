"""
extraction of the sample and read group metadata from the text of an alignment file header

Every function here re-scans the header text from the start and never modifies it, so the same
text may be parsed any number of times (and in any order) with identical results
"""
from typing import Iterator, List, Optional, Tuple

from .constants import FIELD_DELIM, HEADER, LINE_DELIM, TAG_DELIM, TAG_LENGTH
from .error import MissingMetadataError
from .util import logger


def split_fields(line: str) -> List[str]:
    """
    split a single header line into its fields

    Example:
        >>> split_fields('@RG\\tID:lib1\\tSM:sample1')
        ['@RG', 'ID:lib1', 'SM:sample1']
    """
    return [field for field in line.rstrip('\r').split(FIELD_DELIM) if field]


def iter_header_lines(text: str) -> Iterator[List[str]]:
    """
    Yields:
        List[str]: the fields of each non-empty line of the header text
    """
    for line in (text or '').split(LINE_DELIM):
        fields = split_fields(line)
        if fields:
            yield fields


def split_tag(field: str) -> Tuple[Optional[str], str]:
    """
    split a TAG:VALUE header field into the tag and value portions

    Returns:
        Tuple[Optional[str], str]: the tag (None if the field is not tagged) and the value

    Example:
        >>> split_tag('SM:sample:1')
        ('SM', 'sample:1')
        >>> split_tag('@RG')
        (None, '@RG')
    """
    if len(field) > TAG_LENGTH and field[TAG_LENGTH] == TAG_DELIM:
        return field[:TAG_LENGTH], field[TAG_LENGTH + 1:]
    return None, field


def _tagged_value(fields: List[str], tag: str) -> Optional[str]:
    for field in fields[1:]:
        field_tag, value = split_tag(field)
        if field_tag == tag:
            return value
    return None


def _is_read_group(fields: List[str]) -> bool:
    return fields[0] == HEADER.READ_GROUP


def parse_sample_name(text: str) -> str:
    """
    find the sample name from the first SM field anywhere in the header

    Raises:
        MissingMetadataError: no SM field exists in the header text
    """
    for fields in iter_header_lines(text):
        value = _tagged_value(fields, HEADER.SAMPLE)
        if value is not None:
            return value
    raise MissingMetadataError('header does not contain a sample name', HEADER.SAMPLE)


def count_libraries(text: str) -> int:
    """
    count the read group declarations in the header
    """
    return sum([1 for fields in iter_header_lines(text) if _is_read_group(fields)])


def parse_library_names(text: str) -> List[str]:
    """
    Returns:
        List[str]: the identifier of each read group, in the order they are declared in the header

    Raises:
        MissingMetadataError: a read group line has no identifier field
    """
    names = []
    for fields in iter_header_lines(text):
        if not _is_read_group(fields):
            continue
        name = _tagged_value(fields, HEADER.ID)
        if name is None:
            raise MissingMetadataError(
                'read group declaration is missing the identifier field', FIELD_DELIM.join(fields)
            )
        names.append(name)
    return names


def parse_references(text: str) -> List[Tuple[str, int]]:
    """
    Returns:
        List[Tuple[str, int]]: the name and length of each reference sequence declared in the header.
        Declarations missing the name or with a missing or non-numeric length are skipped
    """
    references = []
    for fields in iter_header_lines(text):
        if fields[0] != HEADER.REFERENCE:
            continue
        name = _tagged_value(fields, HEADER.SEQ_NAME)
        length = _tagged_value(fields, HEADER.SEQ_LENGTH)
        if name is None or length is None or not length.isdecimal():
            logger.warning(f'skipping malformed reference sequence declaration: {FIELD_DELIM.join(fields)!r}')
            continue
        references.append((name, int(length)))
    return references
