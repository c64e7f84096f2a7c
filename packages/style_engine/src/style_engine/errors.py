"""Exceptions raised inside engine components.

Failures that cross a component boundary travel as typed results
(``SanitizeResult``, ``CommitResult``); these exceptions stay internal.
"""

from __future__ import annotations


class StyleEngineError(Exception):
    """Base class for style engine errors."""


class OptionRegistryError(StyleEngineError):
    """Raised for duplicate, invalid, or late option registrations."""


class PersistenceError(StyleEngineError):
    """Raised by persistence collaborators when storage fails."""


class ImportFormatError(StyleEngineError):
    """Raised when an export document is malformed or has an unknown format version."""
