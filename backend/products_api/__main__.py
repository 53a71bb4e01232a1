"""
Products API - Server Entry Point
=================================

Usage:
    python -m products_api
    products-api                  (console script)

HOST and PORT come from the environment (see config.Settings).
"""

import uvicorn

from products_api.config import settings


def main() -> None:
    uvicorn.run(
        "products_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
