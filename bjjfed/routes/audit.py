from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, jsonify

from bjjfed.models import ROLE_ADMIN
from bjjfed.routes.errors import error_response
from bjjfed.services.base import ServiceError
from bjjfed.utils.access import role_required


def create_audit_blueprint(*, audit_service, csrf, logger):
    """Create the AI payment audit route."""
    blueprint = Blueprint('audit', __name__)
    csrf.exempt(blueprint)

    @blueprint.route('/api/audit', methods=['POST'])
    @role_required(ROLE_ADMIN)
    def run_audit():
        """Classify every member's payment status and sync the results."""
        try:
            result = audit_service.run()
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Audit error: {e}")
            return jsonify({'error': 'Audit failed'}), 500
        status_code = 200 if result.success else 502
        return jsonify(asdict(result)), status_code

    @blueprint.route('/api/audit/status', methods=['GET'])
    @role_required(ROLE_ADMIN)
    def audit_status():
        return jsonify({'running': audit_service.running})

    return blueprint
