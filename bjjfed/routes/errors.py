from __future__ import annotations

from flask import jsonify

from bjjfed.services.base import ServiceError


def error_response(error: ServiceError):
    return jsonify({'error': error.message}), error.status_code
