"""Dependency license checker for Node.js and Python projects."""

__version__ = "0.1.0"
