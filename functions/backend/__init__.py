"""
Backend package for the storefront API.

This package provides a FastAPI application with document store and
identity provider abstractions over Firestore and Firebase Authentication,
plus in-memory stand-ins for local runs and tests.
"""
