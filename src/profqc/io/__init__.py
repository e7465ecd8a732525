"""I/O module for reading soundings and writing QC results."""

from profqc.io.reader import ProfileReader, dataset_to_handler
from profqc.io.writer import ProfileWriter
from profqc.io.conventions import CFConventions

__all__ = ["ProfileReader", "ProfileWriter", "CFConventions", "dataset_to_handler"]
