"""Edge IP Info - reports the calling client's IP, network metadata and headers."""

from ._version import __version__


__all__ = ["__version__"]
