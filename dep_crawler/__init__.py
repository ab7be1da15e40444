"""dep-crawler: layered, multi-language source dependency crawler."""

__version__ = "0.1.0"
