# app/services/__init__.py
"""Service modules for the Bonparte Cafe backend"""
