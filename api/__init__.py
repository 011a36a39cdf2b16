"""
FastAPI RESTful API for the author and book services.

This module provides REST endpoints for:
- Listing, fetching and creating authors
- Listing, fetching and creating books with author validation
- Health and metrics inspection
"""
