"""
Place routes: nearby sights and lazy per-place detail
"""
import logging

from quart import Blueprint, jsonify

from travel_explorer.providers.base import ProviderError

from .utils import float_arg, get_engine, lat_lon_args

logger = logging.getLogger(__name__)

bp = Blueprint('places', __name__)

MAX_PLACES = 20


@bp.route('/api/places', methods=['GET'])
async def list_places():
    """Nearby places, nearest first.
    Query params: lat, lon, radius (metres, default 3000)
    Returns: { places: [] }
    """
    lat, lon = lat_lon_args()
    radius = float_arg('radius', default=3000.0, low=1.0, high=50000.0)
    engine = get_engine()
    try:
        places = await engine.resolve_places(lat, lon, radius)
        return jsonify({'places': [p.to_dict() for p in places[:MAX_PLACES]]})
    except ProviderError:
        raise
    except Exception:
        logger.exception("places lookup failed for %s,%s", lat, lon)
        return jsonify({'error': 'places lookup failed'}), 500


@bp.route('/api/places/<xid>', methods=['GET'])
async def place_detail(xid):
    engine = get_engine()
    try:
        detail = await engine.describe_place(xid)
        return jsonify(detail.to_dict())
    except ProviderError:
        raise
    except Exception:
        logger.exception("place detail failed for %s", xid)
        return jsonify({'error': 'place detail failed'}), 500


def register(app):
    app.register_blueprint(bp)
