"""ROSRA: revenue-gap analysis for local government own-source revenue."""

__version__ = "1.0.0"
