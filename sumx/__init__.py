"""SumX research paper analyzer backend."""

__version__ = "1.0.0"
