"""
Channel Hub — Entry Point
===========================

Run: python main.py
"""

import logging
import os

from hub.lib import config

# Configure logging
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger("channel-hub")

if __name__ == "__main__":
    import uvicorn

    logger.info("=" * 60)
    logger.info("  CHANNEL HUB — Sales & Marketing Channel Metrics")
    logger.info("=" * 60)
    logger.info(f"  Environment : {os.getenv('ENVIRONMENT', 'development')}")
    logger.info(f"  Server      : http://0.0.0.0:{config.DASHBOARD_PORT}")
    logger.info(f"  API Docs    : http://localhost:{config.DASHBOARD_PORT}/docs")
    logger.info(f"  Live feed   : ws://localhost:{config.DASHBOARD_PORT}/ws/entries")
    logger.info(f"  Refresh     : every {config.LIVE_REFRESH_SECONDS:.0f}s")
    logger.info(f"  Debug       : {config.DEBUG}")
    logger.info("=" * 60)

    uvicorn.run(
        "dashboard.api.main:app",
        host="0.0.0.0",
        port=config.DASHBOARD_PORT,
        reload=config.DEBUG,
    )
