"""Internship feed: polls the upstream internship README and serves it locally."""

__version__ = "0.1.0"
