from __future__ import annotations


class MatchError(Exception):
    """Base class for errors raised by the matching pipeline."""


class InvalidCoordinate(MatchError, ValueError):
    """Latitude/longitude out of range or not a finite number."""

    def __init__(self, latitude: object, longitude: object, reason: str) -> None:
        self.latitude = latitude
        self.longitude = longitude
        self.reason = reason
        super().__init__(f"Invalid coordinate ({latitude}, {longitude}): {reason}")


class DataSourceFailure(MatchError):
    """The candidate store could not be queried.

    Raised by data-access collaborators; the matching service lets it
    propagate so callers can tell "no matches" apart from "couldn't fetch".
    """

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"{source}: {message}")


__all__ = ["MatchError", "InvalidCoordinate", "DataSourceFailure"]
