"""Bluetooth Low Energy command-line utility."""

__version__ = "0.1.0"
