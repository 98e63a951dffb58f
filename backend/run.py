"""Development server entry point."""

import logging
import os
from app import create_app

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 3000))
    logger.info(f"Server listening on http://localhost:{port}")
    app.run(host="0.0.0.0", port=port)
