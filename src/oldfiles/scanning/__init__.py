"""Filesystem scanning for timestamped files."""

from .discovery import DirectoryListing, DirectoryScanner

__all__ = ["DirectoryListing", "DirectoryScanner"]
