"""
Run FastAPI HTTP Server

Starts the residential community management API under uvicorn.
"""

import os
import uvicorn
from residential_api.config import get_config

if __name__ == "__main__":
    config = get_config()

    # Hosting platforms provide PORT / HOST; otherwise fall back to config
    port = int(os.environ.get("PORT", config.server.port))
    host = os.environ.get("HOST", config.server.host)

    uvicorn.run(
        "residential_api.main:app",
        host=host,
        port=port,
        reload=not config.is_production,
        log_level=config.LOG_LEVEL.lower(),
    )
