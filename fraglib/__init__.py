"""
read group discovery and fragment size profiling for paired-end alignment files
"""
__version__ = '1.0.0'
