"""
Infrastructure package: intent classification, fuzzy search and intent store
implementations.
"""
