#!/usr/bin/env python3
"""Errors that abort a sync run."""


class SyncError(Exception):
    """Base class for fatal sync errors."""


class CategoryNotFoundError(SyncError):
    """A category name is missing from the destination's category catalog."""


class CreateEntryError(SyncError):
    """The destination refused to create an entry."""
