# app/routers/__init__.py
"""API routers for the Bonparte Cafe backend"""
