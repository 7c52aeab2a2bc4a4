"""
Exceptions raised by the converters.
"""


class ConversionError(ValueError):
    """Base class for every failure reported by a converter."""


class LayerNotFoundError(ConversionError, KeyError):
    """A requested layer is not present in the grid map."""

    def __init__(self, layer: str, available=()):
        self.layer = layer
        self.available = list(available)
        super().__init__(f"Layer '{layer}' not found in {self.available}")

    def __str__(self) -> str:
        return self.args[0]


class MessageDecodeError(ConversionError):
    """A message is inconsistent with its declared geometry or layout."""


class DegenerateRangeError(ConversionError):
    """Normalization bounds leave no range to map values into."""
