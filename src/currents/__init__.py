"""Currents: one current post per author, with full history."""

__version__ = "0.1.0"
