"""
Exceptions raised by the fetch / normalize / query layers.

Page controllers catch these at their boundary and show a fixed message;
everything below the controllers just raises.
"""

from __future__ import annotations

from typing import Optional


class RepositorioError(Exception):
    """Base class for all repositorio errors."""


class FetchError(RepositorioError):
    """The sheet could not be fetched (transport failure)."""


class NetworkError(FetchError):
    """The endpoint answered with a non-success HTTP status."""

    def __init__(self, status_code: int, url: str, reason: Optional[str] = None) -> None:
        self.status_code = status_code
        self.url = url
        self.reason = reason
        msg = f"HTTP {status_code} for {url}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ParseError(RepositorioError):
    """The response body is not a usable gviz payload."""


class NotFoundError(RepositorioError):
    """A project id is not part of the loaded collection."""

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id!r}")
