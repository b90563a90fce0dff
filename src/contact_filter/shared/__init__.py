"""
Shared utilities: logging and exceptions.
"""
