"""Threaded TCP server that queues newline-delimited messages, with a demo command."""

__version__ = "0.1.0"
__all__ = ["__version__"]