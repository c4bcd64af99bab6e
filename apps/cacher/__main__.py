"""
Cacher Module Entry Point

Allows execution via: python -m apps.cacher

Delegates to the daemon runner, which starts the scheduler and the HTTP server.
"""

import asyncio

from apps.cacher.daemon import main

if __name__ == "__main__":
    asyncio.run(main())
