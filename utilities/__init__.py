"""
Shared utilities for the Book Store API.
"""
