"""Exception types raised by the Formata core.

Unknown ids and degenerate inputs are not errors: the store treats them as
no-ops. Only malformed mutation input and unreadable snapshots raise.
"""

from __future__ import annotations


class FormataError(Exception):
    """Base exception for all Formata errors."""


class ValidationError(FormataError, ValueError):
    """Raised when a mutating operation receives malformed input.

    Store state is left unchanged.
    """


class SchemaError(FormataError, ValueError):
    """Raised when an imported project snapshot is missing required fields.

    Import is all-or-nothing: nothing is applied when this is raised.
    """
