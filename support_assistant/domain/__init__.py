"""
Domain layer package for the support assistant.

This package contains the domain models, interfaces, schemas and services that
implement intent resolution and online learning.
"""
