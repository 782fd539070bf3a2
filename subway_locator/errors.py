"""Exceptions raised by the I/O layers (the geo core never raises)."""


class SubwayLocatorError(Exception):
    """Base class for all package errors."""


class KricApiError(SubwayLocatorError):
    """The KRIC open-data API could not be reached or returned an error."""

    def __init__(self, message: str, result_code: str | None = None):
        super().__init__(message)
        self.result_code = result_code


class CatalogUnavailableError(SubwayLocatorError):
    """No data source could provide a station snapshot."""
