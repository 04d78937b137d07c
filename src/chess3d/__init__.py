"""Volumetric (8x8x8) chess rules engine."""

__version__ = "0.1.0"
