"""Domain-specific exceptions for Takings Core.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from TakingsAPIError for easy catching.
"""

from __future__ import annotations


class TakingsAPIError(Exception):
    """Base exception for all Takings Core errors.

    Users can catch this exception to handle any Takings Core error.
    """

    pass


class ConfigError(TakingsAPIError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - The Loyverse access token is missing
    - The store identifier is missing
    - The accounts file cannot be loaded or parsed
    """

    pass


class ETLError(TakingsAPIError):
    """Raised when a pipeline stage fails."""

    pass


class UpstreamFetchError(ETLError):
    """Raised when a call to the Loyverse API fails.

    This exception is raised when:
    - The receipts, categories or items endpoint returns a non-2xx status
    - The connection fails or times out

    Attributes:
        status_code: HTTP status returned by Loyverse, or None for
            transport-level failures.
        endpoint: Endpoint path that failed (e.g. "receipts").
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class MalformedRecordWarning(UserWarning):
    """Issued when receipts had missing fields replaced by defaults.

    Processing continues; the warning only reports how many records
    were defaulted or skipped in a batch.
    """
