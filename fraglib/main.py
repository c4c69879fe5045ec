#!python
import argparse
import logging
import os
import platform
import sys
import time
from typing import List, Optional

from . import __version__
from . import config as _config
from . import util as _util
from .constants import EXIT_OK
from .pipeline import profile_bam, summarize
from .util import filepath


def create_parser(argv):
    parser = argparse.ArgumentParser(
        formatter_class=_config.CustomHelpFormatter,
        add_help=False,
        description='discover the read groups of an alignment file and compute their fragment size statistics',
    )
    required = parser.add_argument_group('required arguments')
    optional = parser.add_argument_group('optional arguments')
    optional.add_argument('-h', '--help', action='help', help='show this help message and exit')
    optional.add_argument(
        '-v',
        '--version',
        action='version',
        version='%(prog)s version ' + __version__,
        help='Outputs the version number',
    )
    optional.add_argument('--log', help='redirect stdout to a log file', default=None)
    optional.add_argument(
        '--log_level',
        help='level of logging to output',
        choices=['INFO', 'DEBUG'],
        default='INFO',
    )
    required.add_argument(
        '-b', '--bam_file', help='path to the input alignment file', type=filepath, required=True
    )
    required.add_argument(
        '-o', '--outputfile', help='path to the output summary file', required=True, metavar='FILEPATH'
    )
    _config.augment_parser(['sample_cap', 'threads', 'concordant_stdev_multiplier'], optional)
    return parser, parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """
    sets up the parser and checks the validity of command line args
    then profiles the read groups of the input alignment file

    Args:
        argv: List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    if args.log:  # redirect stdout AND stderr to a log file
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    _util.logger.info(f'FRAGLIB: {__version__}')
    _util.logger.info(f'hostname: {platform.node()}')
    _util.log_arguments(args)

    try:
        sample = profile_bam(
            args.bam_file,
            sample_cap=args.sample_cap,
            threads=args.threads,
            concordant_stdev_multiplier=args.concordant_stdev_multiplier,
        )
        if os.path.dirname(args.outputfile):
            _util.mkdirp(os.path.dirname(args.outputfile))
        _util.output_tabbed_file(summarize(sample), args.outputfile)

        duration = int(time.time()) - start_time
        hours = duration - duration % 3600
        minutes = duration - hours - (duration - hours) % 60
        seconds = duration - hours - minutes
        _util.logger.info(
            'run time (hh/mm/ss): {}:{:02d}:{:02d}'.format(hours // 3600, minutes // 60, seconds)
        )
        _util.logger.info(f'run time (s): {duration}')
        return EXIT_OK
    except Exception as err:
        if args.log:
            logging.exception(err)  # capture the error in the logging output file
        raise err
    finally:
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
        for handler in original_logging_handlers:
            logging.root.addHandler(handler)


if __name__ == '__main__':
    main()
