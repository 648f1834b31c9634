"""
Webhook Server

Flask application exposing the GitHub webhook endpoint.
"""

import logging
from typing import Optional

from flask import Flask, request, jsonify
from flask_cors import CORS

from . import __version__
from .api import ChroniclerAPI
from .exceptions import ConfigurationError, ProcessingError
from .github.parser import WebhookPayloadError
from .github.webhooks import (
    EVENT_ID_HEADER,
    EVENT_TYPE_HEADER,
    SIGNATURE_256_HEADER,
    SIGNATURE_HEADER,
    WebhookSignatureError,
)


logger = logging.getLogger(__name__)


def create_app(chronicler_api: Optional[ChroniclerAPI] = None) -> Flask:
    """
    Create the webhook application.

    Args:
        chronicler_api: API instance to dispatch to (built from the environment if omitted)
    """
    app = Flask(__name__)
    # Dashboards may poll the read-only endpoints; webhooks stay same-origin
    CORS(app, resources=[r"/api/v1/health", r"/api/v1/installations"])
    api = chronicler_api or ChroniclerAPI()

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'chronicler',
            'version': __version__
        })

    @app.route('/api/v1/installations', methods=['GET'])
    def installations():
        """Repositories installed since startup."""
        return jsonify({'installed_repositories': api.installations.total})

    @app.route('/api/v1/webhooks/github', methods=['POST'])
    def github_webhook():
        """Receive a GitHub webhook delivery."""
        event_type = request.headers.get(EVENT_TYPE_HEADER, '')
        delivery_id = request.headers.get(EVENT_ID_HEADER)
        signature = request.headers.get(SIGNATURE_256_HEADER) or request.headers.get(SIGNATURE_HEADER)

        logger.debug(f"Webhook delivery {delivery_id}: {event_type}")

        try:
            verdict = api.handle_webhook(event_type, request.get_data(), signature)
        except WebhookSignatureError as e:
            return jsonify({'error': str(e), 'status': 'rejected'}), 403
        except WebhookPayloadError as e:
            return jsonify({'error': str(e), 'status': 'rejected'}), 400
        except ConfigurationError as e:
            return jsonify({'error': str(e), 'status': 'failed'}), 422
        except ProcessingError as e:
            return jsonify({'error': str(e), 'status': 'failed'}), 500

        if verdict is None:
            return jsonify({'status': 'ignored', 'event': event_type}), 202

        return jsonify({
            'status': 'analyzed',
            'is_modifying_production_files': verdict.is_modifying_production_files,
            'is_modifying_release_notes': verdict.is_modifying_release_notes,
            'is_documented': verdict.is_documented,
        })

    return app
