"""relayarr - relay tracker announces to arr applications."""

__version__ = "0.1.0"
