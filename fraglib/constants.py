"""
module responsible for small utility functions and constants used throughout the fraglib package
"""
import argparse
import os


EXIT_OK = 0


def cast_boolean(input_value):
    value = str(input_value).lower()
    if value in ['t', 'true', '1', 'y', 'yes', '+']:
        return True
    elif value in ['f', 'false', '0', 'n', 'no', '-']:
        return False
    raise TypeError('casting to boolean failed', input_value)


class FraglibNamespace:
    """
    Namespace to hold module constants

    Example:
        >>> nspace = FraglibNamespace(thing=1, otherthing=2)
        >>> nspace.thing
        1
        >>> nspace.otherthing
        2
    """
    def __init__(self, *pos, **kwargs):
        object.__setattr__(self, '_defns', {})
        object.__setattr__(self, '_types', {})
        object.__setattr__(self, '_members', {})
        object.__setattr__(self, '_env_overwritable', set())
        object.__setattr__(self, '_env_prefix', 'FRAGLIB')

        for k in pos:
            if k in self._members:
                raise AttributeError('Cannot respecify existing attribute', k, self._members[k])
            self[k] = k

        for attr, val in kwargs.items():
            if attr in self._members:
                raise AttributeError('Cannot respecify existing attribute', attr, self._members[attr])
            self[attr] = val

        for attr, value in self._members.items():
            self._set_type(attr, type(value))

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, ', '.join(sorted(['{}={}'.format(k, repr(v)) for k, v in self.items()])))

    def get_env_name(self, attr):
        """
        Get the name of the corresponding environment variable

        Example:
            >>> nspace = FraglibNamespace(a=1)
            >>> nspace.get_env_name('a')
            'FRAGLIB_A'
        """
        if self._env_prefix:
            return '{}_{}'.format(self._env_prefix, attr).upper()
        return attr.upper()

    def get_env_var(self, attr):
        """
        retrieve the environment variable definition of a given attribute
        """
        env_name = self.get_env_name(attr)
        env = os.environ[env_name].strip()
        attr_type = self._types.get(attr, str)
        return attr_type(env)

    def is_env_overwritable(self, attr):
        """
        Returns:
            bool: True if the variable is overrided by specifying the environment variable equivalent
        """
        return attr in self._env_overwritable

    def __getattribute__(self, attr):
        try:
            return object.__getattribute__(self, attr)
        except AttributeError as err:
            variables = object.__getattribute__(self, '_members')
            if attr not in variables:
                raise err
            if self.is_env_overwritable(attr):
                try:
                    return self.get_env_var(attr)
                except KeyError:
                    pass
            return variables[attr]

    def items(self):
        """
        Example:
            >>> FraglibNamespace(thing=1, otherthing=2).items()
            [('thing', 1), ('otherthing', 2)]
        """
        return [(k, self[k]) for k in self.keys()]

    def __getitem__(self, key):
        return getattr(self, key)

    def __setitem__(self, key, val):
        self.__setattr__(key, val)

    def __setattr__(self, attr, val):
        if attr.startswith('_'):
            raise ValueError('cannot set private', attr)
        object.__getattribute__(self, '_members')[attr] = val

    def keys(self):
        return [k for k in self._members]

    def values(self):
        return [self[k] for k in self._members]

    def __iter__(self):
        return iter(self.keys())

    def _set_type(self, attr, cast_type):
        if cast_type == bool:
            self._types[attr] = cast_boolean
        else:
            self._types[attr] = cast_type

    def type(self, attr, *pos):
        """
        returns the type

        Example:
            >>> nspace = FraglibNamespace(thing=1, otherthing=2)
            >>> nspace.type('thing')
            <class 'int'>
        """
        if len(pos) > 1:
            raise TypeError('too many arguments. type takes a single \'default\' value argument')
        try:
            return self._types[attr]
        except KeyError as err:
            if pos:
                return pos[0]
            raise err

    def define(self, attr, *pos):
        """
        Get the definition of a given attribute or return a default (when given) if the attribute does not exist
        """
        if len(pos) > 1:
            raise TypeError('too many arguments. define takes a single \'default\' value argument')
        try:
            return self._defns[attr]
        except KeyError as err:
            if pos:
                return pos[0]
            raise err

    def add(self, attr, value, defn=None, cast_type=None, env_overwritable=False):
        """
        Add an attribute to the name space

        Args:
            attr (str): name of the attribute being added
            value: the value of the attribute
            defn (str): the definition, will be used in generating help menus
            cast_type (callable): the function to use in casting the value
            env_overwritable (bool): True if this attribute will be overriden by its environment variable equivalent

        Example:
            >>> nspace = FraglibNamespace()
            >>> nspace.add('thing', 1, cast_type=int, defn='I am a thing')
        """
        if cast_type:
            self._set_type(attr, cast_type)
        else:
            self._set_type(attr, type(value))
        if defn:
            self._defns[attr] = defn
        if env_overwritable:
            self._env_overwritable.add(attr)
        self[attr] = value


def positive_int(num):
    """
    cast input to an integer greater than zero

    Raises:
        argparse.ArgumentTypeError: if the input cannot be cast to an int or is not positive
    """
    try:
        num = int(num)
    except ValueError:
        raise argparse.ArgumentTypeError('Must be a positive integer')
    if num < 1:
        raise argparse.ArgumentTypeError('Must be a positive integer')
    return num


SAMPLE_FRAGMENTS = 1000000
""":class:`int`: maximum number of fragment sizes sampled per library"""

HEADER = FraglibNamespace(
    READ_GROUP='@RG',
    REFERENCE='@SQ',
    SAMPLE='SM',
    ID='ID',
    SEQ_NAME='SN',
    SEQ_LENGTH='LN',
)
""":class:`FraglibNamespace`: record types and field tags used in the SAM header text"""

LINE_DELIM = '\n'
FIELD_DELIM = '\t'
TAG_DELIM = ':'
TAG_LENGTH = 2

READ_GROUP_TAG = 'RG'
""":class:`str`: the alignment record aux tag holding the read group identifier"""

AUX_TYPE_CODES = frozenset('AcCsSiIfZHB')
""":class:`frozenset`: one-character SAM aux value type codes which may prefix a raw tag value"""

DEFAULTS = FraglibNamespace()
DEFAULTS.add(
    'sample_cap', SAMPLE_FRAGMENTS, cast_type=positive_int, env_overwritable=True,
    defn='maximum number of fragment sizes to sample for each library')
DEFAULTS.add(
    'concordant_stdev_multiplier', 4, cast_type=positive_int, env_overwritable=True,
    defn='number of standard deviations from the mean fragment size considered concordant')
DEFAULTS.add(
    'threads', 1, cast_type=positive_int, env_overwritable=True,
    defn='number of threads used to compute the per-library statistics')

COLUMNS = FraglibNamespace(
    sample='sample',
    library='library',
    library_index='library_index',
    fragments_sampled='fragments_sampled',
    read_length='read_length',
    frag_med='frag_med',
    frag_avg='frag_avg',
    frag_std='frag_std',
    conc_min='conc_min',
    conc_max='conc_max',
    stats_valid='stats_valid',
)
""":class:`FraglibNamespace`: column names for the per-library summary output"""


def sort_columns(input_columns):
    order = {}
    for i, col in enumerate(COLUMNS.values()):
        order[col] = i
    temp = sorted([c for c in input_columns if c in order], key=lambda x: order[x])
    temp = temp + sorted([c for c in input_columns if c not in order])
    return temp


def is_aux_type_prefixed(value):
    """
    checks if a raw tag value starts with a SAM aux type code followed by the actual value

    Example:
        >>> is_aux_type_prefixed('Zlib1')
        True
        >>> is_aux_type_prefixed('Z')
        False
    """
    return value is not None and len(value) > 1 and value[0] in AUX_TYPE_CODES
