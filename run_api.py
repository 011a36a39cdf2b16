#!/usr/bin/env python3
"""
Script to run the Bookshelf BFF API server.
"""

import uvicorn

from api.config import config
from utilities.config import config as bff_config


def main():
    """Run the API server."""
    print("Starting Bookshelf BFF API Server")
    print(f"Host: {config.host}")
    print(f"Port: {config.port}")
    print(f"Debug: {config.debug}")
    print(f"Authors: {bff_config.serve_authors}  Books: {bff_config.serve_books}")
    print(f"Author service: {bff_config.author_service_url}")
    print(f"Notification topic: {bff_config.redis_topic}")
    print("=" * 50)

    uvicorn.run(
        "api.main:build_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    main()
