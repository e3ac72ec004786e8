"""
Schema package for Pydantic models used in API request/response validation.
"""
