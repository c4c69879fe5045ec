import os

import pandas as pd
import pytest

from fraglib import util as _util
from fraglib.constants import COLUMNS


class TestBashExpands:
    def test_brace_expansion(self, tmp_path):
        for name in ['a.bam', 'b.bam', 'c.bam']:
            (tmp_path / name).write_text('')
        result = _util.bash_expands(str(tmp_path / '{a,b}.bam'))
        assert sorted([os.path.basename(f) for f in result]) == ['a.bam', 'b.bam']

    def test_no_match(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            _util.bash_expands(str(tmp_path / 'missing*.bam'))


class TestFilepath:
    def test_single_file(self, tmp_path):
        (tmp_path / 'a.bam').write_text('')
        assert _util.filepath(str(tmp_path / '*.bam')) == str(tmp_path / 'a.bam')

    def test_multiple_files(self, tmp_path):
        (tmp_path / 'a.bam').write_text('')
        (tmp_path / 'b.bam').write_text('')
        with pytest.raises(TypeError):
            _util.filepath(str(tmp_path / '*.bam'))

    def test_missing(self, tmp_path):
        with pytest.raises(TypeError):
            _util.filepath(str(tmp_path / 'a.bam'))


class TestOutputTabbedFile:
    def test_column_order_and_nulls(self, tmp_path):
        filename = str(tmp_path / 'out.tab')
        rows = [
            {COLUMNS.frag_avg: 100.5, COLUMNS.library: 'lib1', 'extra': 1},
            {COLUMNS.frag_avg: None, COLUMNS.library: 'lib2', 'extra': 2},
        ]
        _util.output_tabbed_file(rows, filename)
        df = pd.read_csv(filename, sep='\t', dtype=str, keep_default_na=False)
        assert list(df.columns) == [COLUMNS.library, COLUMNS.frag_avg, 'extra']
        assert list(df[COLUMNS.frag_avg]) == ['100.5', 'None']


class TestMkdirp:
    def test_existing(self, tmp_path):
        assert _util.mkdirp(str(tmp_path)) == str(tmp_path)

    def test_nested(self, tmp_path):
        dirname = str(tmp_path / 'a' / 'b')
        _util.mkdirp(dirname)
        assert os.path.isdir(dirname)
