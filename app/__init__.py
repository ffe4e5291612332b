# app/__init__.py
"""Bonparte Cafe backend and client application"""

__version__ = "1.0.0"
