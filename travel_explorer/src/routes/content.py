"""
Content routes: destination summary, geocoding and photos
"""
import logging

from quart import Blueprint, jsonify

from travel_explorer.providers.base import ProviderError

from .utils import get_engine, str_arg

logger = logging.getLogger(__name__)

bp = Blueprint('content', __name__)


@bp.route('/api/summary', methods=['GET'])
async def summary():
    """Short destination summary; `summary` is null when no source had one."""
    title = str_arg('title')
    engine = get_engine()
    try:
        result = await engine.resolve_summary(title)
        return jsonify({'title': title, 'summary': result.to_dict() if result else None})
    except ProviderError:
        raise
    except Exception:
        logger.exception("summary failed for %r", title)
        return jsonify({'error': 'summary failed'}), 500


@bp.route('/api/geocode', methods=['GET'])
async def geocode():
    query = str_arg('q')
    engine = get_engine()
    try:
        result = await engine.geocode(query)
        return jsonify({'query': query, 'result': result.to_dict() if result else None})
    except ProviderError:
        raise
    except Exception:
        logger.exception("geocode failed for %r", query)
        return jsonify({'error': 'geocode failed'}), 500


@bp.route('/api/photos', methods=['GET'])
async def photos():
    query = str_arg('q')
    engine = get_engine()
    try:
        results = await engine.resolve_photos(query)
        return jsonify({'query': query, 'photos': [p.to_dict() for p in results]})
    except ProviderError:
        raise
    except Exception:
        logger.exception("photo search failed for %r", query)
        return jsonify({'error': 'photo search failed'}), 500


def register(app):
    app.register_blueprint(bp)
