"""
Weather routes: current conditions with a short forecast, and the monthly outlook
"""
import logging

from quart import Blueprint, jsonify

from travel_explorer.providers.base import ProviderError
from travel_explorer.services.climate import rate_months

from .utils import get_engine, lat_lon_args, str_arg

logger = logging.getLogger(__name__)

bp = Blueprint('weather', __name__)


@bp.route('/api/weather', methods=['GET'])
async def weather():
    """Get weather data for a location"""
    lat, lon = lat_lon_args()
    engine = get_engine()
    try:
        digest = await engine.resolve_weather(lat, lon)
        return jsonify({'lat': lat, 'lon': lon, 'weather': digest.to_dict() if digest else None})
    except ProviderError:
        raise
    except Exception:
        logger.exception("weather failed for %s,%s", lat, lon)
        return jsonify({'error': 'weather failed'}), 500


@bp.route('/api/climate', methods=['GET'])
async def climate():
    """Monthly outlook aggregated from the forecast.
    Query params: title, lat, lon
    Returns: { approximate: true, months: [] | null, ratings: {0..11: good|bad|unknown} }
    """
    title = str_arg('title')
    lat, lon = lat_lon_args()
    engine = get_engine()
    try:
        months = await engine.resolve_climate(title, lat, lon)
        ratings = rate_months(months or [])
        return jsonify({
            'title': title,
            'approximate': True,
            'months': [m.to_dict() for m in months] if months is not None else None,
            'ratings': {str(m): r.value for m, r in ratings.items()},
        })
    except ProviderError:
        raise
    except Exception:
        logger.exception("climate failed for %r", title)
        return jsonify({'error': 'climate failed'}), 500


def register(app):
    app.register_blueprint(bp)
