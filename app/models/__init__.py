# app/models/__init__.py
"""Pydantic models for the Bonparte Cafe documents and API"""
