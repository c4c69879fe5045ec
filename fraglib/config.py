import argparse

from .constants import DEFAULTS, cast_boolean, positive_int
from .util import filepath


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in add_argument

    Example:
        >>> get_metavar(bool)
        '{True,False}'
    """
    if arg_type in [bool, cast_boolean]:
        return '{True,False}'
    elif arg_type == float:
        return 'FLOAT'
    elif arg_type in [int, positive_int]:
        return 'INT'
    elif arg_type == filepath:
        return 'FILEPATH'
    return None


def augment_parser(arguments, parser):
    """
    add the tunable defaults as optional arguments to a parser. Each default is read from its
    environment variable (if set) at the time the parser is built

    Args:
        arguments (List[str]): names of the defaults to add
        parser (argparse.ArgumentParser): the parser or argument group to add to
    """
    for arg in arguments:
        parser.add_argument(
            '--{}'.format(arg),
            default=DEFAULTS[arg],
            type=DEFAULTS.type(arg),
            help=DEFAULTS.define(arg),
        )
