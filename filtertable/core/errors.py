"""Exceptions raised by filtertable.

The filtering engine itself degrades silently (unknown filter keys fall back
to global search, missing fields read as None, out-of-range pages give an
empty slice). Exceptions are reserved for invalid configuration supplied at
construction time.
"""


class FilterTableError(Exception):
    """Base class for all filtertable errors."""

    pass


class InvalidPageConfiguration(FilterTableError, ValueError):
    """Raised when a page configuration cannot be used.

    This error is raised when:
    1. ``page_length`` is not a positive integer
    2. ``current_page`` is not a positive integer
    3. A page-count policy name is not one of the known policies

    Out-of-range page requests made after construction (``set_page``) are
    not validated and simply yield an empty slice.
    """

    pass
