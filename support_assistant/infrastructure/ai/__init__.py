"""
AI module for the support assistant.

Contains the statistical intent classifier together with the greeting matcher
and the paraphrase expander used for online learning.
"""
