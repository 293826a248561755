from __future__ import annotations

import hmac

from flask import Blueprint, jsonify, request
from flask_login import login_required

from bjjfed.models import ROLE_ADMIN
from bjjfed.utils.access import role_required


def create_sync_blueprint(*, sync_service, store, limiter, csrf, webhook_token: str, logger):
    """Create cloud sync routes, including the database change webhook."""
    blueprint = Blueprint('sync', __name__)
    csrf.exempt(blueprint)

    @blueprint.route('/webhook/sync/<token>', methods=['POST'])
    @limiter.limit('120 per minute')
    def change_webhook(token):
        """Database change notification - no session auth, uses token."""
        if not webhook_token or not hmac.compare_digest(token, webhook_token):
            return jsonify({'error': 'Invalid webhook'}), 404

        payload = request.get_json(silent=True) or {}
        try:
            refreshed = sync_service.handle_change(payload)
        except Exception as e:
            logger.error(f"Change webhook error: {e}")
            return jsonify({'error': 'Webhook processing failed'}), 500

        return jsonify({
            'success': True,
            'refreshed': refreshed,
            'cloud_status': store.cloud_status,
        }), 202 if refreshed else 200

    @blueprint.route('/api/sync', methods=['POST'])
    @role_required(ROLE_ADMIN)
    def manual_sync():
        """Pull teachers, students and announcements from the cloud."""
        if not sync_service.enabled:
            return jsonify({'error': 'Cloud backend is not configured', 'cloud_status': store.cloud_status}), 400
        ok = sync_service.refresh()
        return jsonify({'success': ok, 'cloud_status': store.cloud_status}), 200 if ok else 502

    @blueprint.route('/api/sync/status', methods=['GET'])
    @login_required
    def sync_status():
        return jsonify({'cloud_enabled': sync_service.enabled, 'cloud_status': store.cloud_status})

    return blueprint
