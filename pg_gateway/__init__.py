"""Multi-provider card payment gateway."""

__version__ = "0.1.0"
