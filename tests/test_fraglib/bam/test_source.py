from unittest import mock

import pytest

from fraglib.bam.source import AlignmentRecordView, BamRecordSource
from fraglib.error import DecodeError
from fraglib.header import parse_library_names, parse_sample_name

from ...util import build_header, write_bam


@pytest.fixture
def bam_file(tmp_path):
    header = build_header('sample1', ['lib1', 'lib2'])
    return write_bam(
        str(tmp_path / 'input.bam'),
        header,
        [
            {'insert_size': 300, 'read_group': 'lib1'},
            {'insert_size': -300, 'read_group': 'lib1', 'reverse': True, 'mate_reverse': False},
            {'insert_size': 250, 'read_group': 'lib2', 'read_length': 75},
            {'insert_size': 400},
        ],
    )


class TestAlignmentRecordView:
    def test_defaults(self):
        record = AlignmentRecordView(300)
        assert record.insert_size == 300
        assert not record.is_reverse_strand
        assert record.mate_is_reverse_strand
        assert record.read_group_tag is None
        assert record.query_length is None

    def test_repr(self):
        assert 'insert_size=300' in repr(AlignmentRecordView(300, read_group_tag='lib1'))


class TestBamRecordSource:
    def test_header_text(self, bam_file):
        with BamRecordSource(bam_file) as source:
            text = source.header_text()
        assert parse_sample_name(text) == 'sample1'
        assert parse_library_names(text) == ['lib1', 'lib2']

    def test_records(self, bam_file):
        with BamRecordSource(bam_file) as source:
            records = list(source)
        assert [r.insert_size for r in records] == [300, -300, 250, 400]
        assert [r.read_group_tag for r in records] == ['lib1', 'lib1', 'lib2', None]
        assert [r.is_reverse_strand for r in records] == [False, True, False, False]
        assert [r.mate_is_reverse_strand for r in records] == [True, False, True, True]
        assert [r.query_length for r in records] == [50, 50, 75, 50]

    def test_single_pass(self, bam_file):
        with BamRecordSource(bam_file) as source:
            list(source)
            with pytest.raises(RuntimeError):
                iter(source)

    def test_close_twice(self, bam_file):
        source = BamRecordSource(bam_file)
        source.close()
        source.close()
        assert source.fh is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(DecodeError):
            BamRecordSource(str(tmp_path / 'missing.bam'))


    def test_decode_error_mid_stream(self, bam_file):
        def truncated(until_eof=True):
            yield mock.Mock(template_length=300, is_reverse=False, mate_is_reverse=True, query_length=50, **{
                'has_tag.return_value': False,
            })
            raise OSError('truncated file')

        source = BamRecordSource(bam_file)
        original_fh = source.fh
        source.fh = mock.Mock(fetch=truncated)
        records = iter(source)
        assert next(records).insert_size == 300
        with pytest.raises(DecodeError):
            next(records)
        source.fh = original_fh
        source.close()

    def test_close_error(self, bam_file):
        source = BamRecordSource(bam_file)
        original_fh = source.fh
        source.fh = mock.Mock(**{'close.side_effect': OSError('error closing')})
        with pytest.raises(DecodeError):
            source.close()
        original_fh.close()
