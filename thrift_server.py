"""
Thrift Fashion Proxy - server entry point

Curated secondhand fashion feed for the client app. All eBay traffic goes
through this process; the client never sees eBay credentials.

Run:
    python thrift_server.py
or:
    uvicorn thrift_server:app --port 3000
"""

import logging

import uvicorn

from config import HOST, LOG_LEVEL, PORT, ThriftSettings
from services.app_factory import create_app
from services.app_state import AppState

# ============================================================
# CONFIGURATION
# ============================================================

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

settings = ThriftSettings.from_env()
app = create_app(AppState.from_settings(settings))


# ============================================================
# MAIN
# ============================================================

if __name__ == "__main__":
    logger.info(f"Server running on port {PORT}")
    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        reload=False,
        log_level=LOG_LEVEL.lower(),
    )
