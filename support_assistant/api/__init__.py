"""
API layer package for the support assistant.

This package contains the FastAPI dependencies and routers that ferry JSON
between the chat widget and the resolution services.
"""
