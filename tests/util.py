import glob
import os

import pysam


def glob_exists(*pos, strict=False, n=1):
    globexpr = os.path.join(*pos)
    file_list = glob.glob(globexpr)
    if strict and len(file_list) == n:
        return file_list[0] if len(file_list) == 1 else file_list
    elif not strict and len(file_list) > 0:
        return file_list
    else:
        print(globexpr)
        print(file_list)
        return False


def build_header(sample_name='sample1', libraries=('lib1', 'lib2'), references=(('chr1', 100000),)):
    """
    build the pysam header dictionary for a single sample with the given read groups
    """
    header = {
        'HD': {'VN': '1.6', 'SO': 'unsorted'},
        'SQ': [{'SN': name, 'LN': length} for name, length in references],
        'RG': [],
    }
    for lib in libraries:
        read_group = {'ID': lib, 'LB': lib}
        if sample_name is not None:
            read_group['SM'] = sample_name
        header['RG'].append(read_group)
    if not header['RG']:
        del header['RG']
    return header


def build_read(
    header, name, insert_size, read_group=None, reverse=False, mate_reverse=True, start=100, read_length=50
):
    read = pysam.AlignedSegment(header)
    read.query_name = name
    read.query_sequence = 'A' * read_length
    read.query_qualities = pysam.qualitystring_to_array('I' * read_length)
    read.flag = 1 | 2 | 64 | (16 if reverse else 0) | (32 if mate_reverse else 0)
    read.reference_id = 0
    read.reference_start = start
    read.mapping_quality = 60
    read.cigartuples = [(0, read_length)]
    read.next_reference_id = 0
    read.next_reference_start = start + max(0, insert_size - read_length)
    read.template_length = insert_size
    if read_group is not None:
        read.set_tag('RG', read_group, value_type='Z')
    return read


def write_bam(filename, header, reads):
    """
    write an unsorted bam file

    Args:
        reads (List[Dict]): keyword arguments passed to build_read for each read
    """
    with pysam.AlignmentFile(filename, 'wb', header=header) as fh:
        for i, read_args in enumerate(reads):
            read_args = dict(read_args)
            read_args.setdefault('name', 'read{}'.format(i))
            fh.write(build_read(fh.header, **read_args))
    return filename
