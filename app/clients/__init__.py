# app/clients/__init__.py
"""HTTP clients for the public site and the admin panel"""
