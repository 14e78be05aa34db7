"""
Admin routes: health check
"""
import time

from quart import Blueprint, jsonify

from travel_explorer.config import get_config

bp = Blueprint('admin', __name__)


@bp.route('/health')
async def health():
    """Lightweight health endpoint returning component status."""
    from travel_explorer.src import app as appmod

    config = get_config()
    status = {
        'app': 'ok',
        'time': time.time(),
        'ready': appmod.content_engine is not None,
        'opentripmap': bool(config.api_keys.opentripmap),
        'openweathermap': bool(config.api_keys.openweathermap),
        'unsplash': bool(config.api_keys.unsplash),
    }
    return jsonify(status)


def register(app):
    app.register_blueprint(bp)
