"""Readers for loading data from the timebill store."""

from timebill.readers.directory_reader import DirectoryReader
from timebill.readers.tracking_reader import TrackingReader, UnbilledSessionRow

__all__ = ["DirectoryReader", "TrackingReader", "UnbilledSessionRow"]
