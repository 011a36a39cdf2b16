"""
Author and book catalog core.

This package contains:
- Entity, command and view models
- The in-memory resource store
- The author service client used to validate book authors
- Best-effort change notifications
- Author and book services
"""

__version__ = "1.0.0"
