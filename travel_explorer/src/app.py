"""
Travel explorer Quart app
"""

import logging
from typing import Optional

from quart import Quart, jsonify
from quart_cors import cors

from travel_explorer.config import get_config, setup_logging
from travel_explorer.providers.base import ProviderError
from travel_explorer.services.engine import ContentEngine
from travel_explorer.services.session_manager import SessionManager
from travel_explorer.src.routes import register_blueprints
from travel_explorer.src.routes.utils import ParamError

logger = logging.getLogger(__name__)

app = Quart(__name__)

cors(app, allow_origin=get_config().cors_origin, allow_methods=["GET", "OPTIONS"])

# Global engine, built when the server starts
session_manager: Optional[SessionManager] = None
content_engine: Optional[ContentEngine] = None


@app.before_serving
async def startup():
    global session_manager, content_engine
    setup_logging()
    config = get_config()
    session_manager = SessionManager(config)
    session = await session_manager.get_session()
    content_engine = ContentEngine(session, config)
    logger.info("Content engine ready (%s)", config.environment.value)


@app.after_serving
async def shutdown():
    global session_manager, content_engine
    if session_manager:
        await session_manager.close()
    session_manager = None
    content_engine = None


@app.errorhandler(ParamError)
async def handle_bad_params(err):
    return jsonify({"error": str(err)}), 400


@app.errorhandler(ProviderError)
async def handle_provider_error(err):
    logger.error("Provider wiring error: %s", err)
    return jsonify({"error": "service not ready"}), 503


register_blueprints(app)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=get_config().port)
