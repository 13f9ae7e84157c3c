from __future__ import annotations


class ProxyError(Exception):
    pass


class UpstreamError(ProxyError):
    """FRED could not be reached, or answered with an error.

    ``status_code`` is None when the transport failed before any HTTP status
    was received.
    """

    def __init__(self, status_code: int | None = None, message: str | None = None) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.message:
            return f"FRED API errored with status code {self.status_code}: {self.message}"
        return f"FRED API errored with status code {self.status_code}"


class StorageError(ProxyError):
    pass


class SeriesNotFound(ProxyError):
    def __init__(self, series_id: str) -> None:
        self.series_id = series_id
        super().__init__(f"series not found: {series_id}")
