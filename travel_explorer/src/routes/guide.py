"""
Guide routes - travel guide sections
"""
import logging

from quart import Blueprint, jsonify

from travel_explorer.providers.base import ProviderError

from .utils import get_engine, int_arg, str_arg

logger = logging.getLogger(__name__)

guide = Blueprint('guide', __name__)


def register(app):
    """Register the guide blueprint with the app"""
    app.register_blueprint(guide)


@guide.route('/api/guide', methods=['GET'])
async def get_guide():
    """Resolve a destination guide.
    Query params: title
    Returns: { title, available, refs: [], initial_html, sections: {id: html} }
    """
    title = str_arg('title')
    engine = get_engine()
    try:
        view = await engine.resolve_guide(title)
        payload = view.to_dict()
        payload['sections'] = {str(sid): html for sid, html in view.sections.items()}
        return jsonify(payload)
    except ProviderError:
        raise
    except Exception:
        logger.exception("guide failed for %r", title)
        return jsonify({'error': 'guide failed'}), 500


@guide.route('/api/guide/section', methods=['GET'])
async def get_guide_section():
    """One sanitized section body, served from the cache when possible.
    Query params: title, section
    """
    title = str_arg('title')
    section_id = int_arg('section')
    engine = get_engine()
    try:
        html = await engine.get_guide_section(title, section_id)
        return jsonify({'title': title, 'section': section_id, 'html': html})
    except ProviderError:
        raise
    except Exception:
        logger.exception("guide section %s failed for %r", section_id, title)
        return jsonify({'error': 'guide section failed'}), 500
