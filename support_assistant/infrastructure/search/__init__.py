"""
Fuzzy lexical search over intent metadata.
"""
