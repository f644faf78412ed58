"""Errors raised by every document store adapter, whatever the driver."""


class DuplicateDocumentError(Exception):
    """A unique index (such as the user email) rejected a write."""
