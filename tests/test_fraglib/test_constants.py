import argparse
import os
from unittest.mock import patch

import pytest

from fraglib.constants import (
    COLUMNS,
    DEFAULTS,
    SAMPLE_FRAGMENTS,
    FraglibNamespace,
    cast_boolean,
    is_aux_type_prefixed,
    positive_int,
    sort_columns,
)


class TestFraglibNamespace:
    def test_attributes(self):
        nspace = FraglibNamespace(thing=1, otherthing=2)
        assert nspace.thing == 1
        assert nspace['otherthing'] == 2
        assert nspace.keys() == ['thing', 'otherthing']
        assert nspace.values() == [1, 2]

    def test_respecify(self):
        with pytest.raises(AttributeError):
            FraglibNamespace('a', a=1)

    def test_private(self):
        nspace = FraglibNamespace()
        with pytest.raises(ValueError):
            nspace._thing = 1


class TestDefaults:
    def test_sample_cap(self):
        assert DEFAULTS.sample_cap == SAMPLE_FRAGMENTS == 1000000

    def test_env_override(self):
        with patch.dict(os.environ, {'FRAGLIB_SAMPLE_CAP': '500'}):
            assert DEFAULTS.sample_cap == 500
        assert DEFAULTS.sample_cap == SAMPLE_FRAGMENTS

    def test_env_override_invalid(self):
        with patch.dict(os.environ, {'FRAGLIB_THREADS': '0'}):
            with pytest.raises(argparse.ArgumentTypeError):
                DEFAULTS.threads

    def test_definitions(self):
        for attr in DEFAULTS.keys():
            assert DEFAULTS.define(attr)
            assert DEFAULTS.type(attr) == positive_int


class TestCasting:
    def test_positive_int(self):
        assert positive_int('3') == 3
        with pytest.raises(argparse.ArgumentTypeError):
            positive_int('0')
        with pytest.raises(argparse.ArgumentTypeError):
            positive_int('x')

    def test_cast_boolean(self):
        assert cast_boolean('Yes')
        assert not cast_boolean('0')
        with pytest.raises(TypeError):
            cast_boolean('maybe')


class TestAuxTypePrefix:
    def test_prefixed(self):
        assert is_aux_type_prefixed('Zlib1')

    def test_not_prefixed(self):
        assert not is_aux_type_prefixed('lib1')
        assert not is_aux_type_prefixed('Z')
        assert not is_aux_type_prefixed('')
        assert not is_aux_type_prefixed(None)


class TestSortColumns:
    def test_known_first(self):
        assert sort_columns(['zzz', COLUMNS.conc_max, COLUMNS.sample]) == [COLUMNS.sample, COLUMNS.conc_max, 'zzz']
