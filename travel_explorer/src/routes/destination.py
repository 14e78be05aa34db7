"""
Destination route: everything the engine can gather for one name
"""
import logging

from quart import Blueprint, jsonify

from travel_explorer.providers.base import ProviderError

from .utils import get_engine, str_arg

logger = logging.getLogger(__name__)

bp = Blueprint('destination', __name__)


@bp.route('/api/destination', methods=['GET'])
async def destination():
    name = str_arg('name')
    engine = get_engine()
    try:
        bundle = await engine.explore(name)
        return jsonify(bundle.to_dict())
    except ProviderError:
        raise
    except Exception:
        logger.exception("destination lookup failed for %r", name)
        return jsonify({'error': 'destination lookup failed'}), 500


def register(app):
    app.register_blueprint(bp)
