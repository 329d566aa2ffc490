"""Exceptions raised while aggregating scores and building map data."""


class ChoroplethError(Exception):
    """Base class for inspection map errors."""


class EmptyDatasetError(ChoroplethError):
    """Raised when a color domain is requested over zero neighborhoods."""


class UnknownNeighborhoodError(ChoroplethError, KeyError):
    """Raised when a neighborhood name has no matching aggregate."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"No aggregate scores for neighborhood {self.name!r}"
