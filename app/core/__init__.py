# app/core/__init__.py
"""Core modules for the Bonparte Cafe backend"""
