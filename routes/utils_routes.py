from flask import Blueprint, jsonify, current_app
from datetime import datetime, timezone
import time

from routes.auth_routes import token_optional

utils_bp = Blueprint('utils', __name__)

_started_at = time.monotonic()


@utils_bp.route('/', methods=['GET'])
@token_optional
def welcome(current_user):
    return jsonify({
        'msg': 'Service is healthy',
        'user': current_user.to_dict() if current_user else None
    }), 200


@utils_bp.route('/health', methods=['GET'])
def health_check():
    return jsonify({
        'success': True,
        'message': 'Service is healthy',
        'data': {
            'status': 'healthy',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'uptime': round(time.monotonic() - _started_at, 3),
            'environment': current_app.config.get('APP_ENV'),
            'version': current_app.config.get('APP_VERSION'),
        }
    }), 200
