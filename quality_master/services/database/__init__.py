"""
Database Module - SQLite plumbing for the form state store
"""

from .connection import DatabaseConnection

__all__ = ['DatabaseConnection']
