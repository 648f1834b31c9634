#!/usr/bin/env python3
"""
Chronicler Webhook Server

Simple Flask server receiving GitHub webhooks and reporting release-note statuses.
"""

import sys
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from chronicler.api import ChroniclerAPI
from chronicler.config import get_config
from chronicler.server import create_app

config = get_config()
app = create_app(ChroniclerAPI(config))

if __name__ == '__main__':
    print("Starting Chronicler webhook server...")
    print(f"Server will be available at: http://{config.server.host}:{config.server.port}")
    print("   - Health Check: GET /api/v1/health")
    print("   - GitHub Webhooks: POST /api/v1/webhooks/github")
    print("   - Installations: GET /api/v1/installations")

    app.run(
        host=config.server.host,
        port=config.server.port,
        debug=config.debug
    )
