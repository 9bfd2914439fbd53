"""Leapfrog simulations of waves on a string with fixed ends."""

__version__ = "0.1.0"
