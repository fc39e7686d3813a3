"""Flask web application exposing the authentication API."""

# Middleware order: ProxyFix -> CORS -> rate limiter -> request logger -> routes
# -> 404 responder -> centralized error responder.
from flask import Blueprint, Flask, current_app, request, jsonify, g
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.serving import WSGIRequestHandler
import logging
import sys
import time
import traceback
from typing import Optional

import redis

from ..auth import AuthService
from ..config import Settings, SERVER_TIMEOUT
from ..database import AccountStore, get_client, init_db
from ..errors import ConfigError, describe_error
from ..schemas import MessageResponse
from ..security import PasswordHasher, configure_tokens, issue_session, clear_session

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


def _auth_service() -> AuthService:
    return current_app.extensions['auth_service']


def _message(text: str, status: int = 200):
    return jsonify(MessageResponse(message=text).model_dump()), status


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new account and start its session."""
    account = _auth_service().register(request.get_json(silent=True))

    response, status = _message("Account registered successfully.")
    issue_session(response, account.id)
    return response, status


@auth_bp.route('/login', methods=['POST'])
def login():
    """Check credentials and start a session."""
    account = _auth_service().login(request.get_json(silent=True))

    response, status = _message("Login successfully.")
    issue_session(response, account.id)
    return response, status


# No authentication check: logging out without a session is a no-op that still succeeds.
# The signed token itself stays valid until it expires.
@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Clear the session cookie."""
    response, status = _message("Logged out successfully")
    clear_session(response)
    return response, status


def liveness():
    return "Api is running", 200, {'Content-Type': 'text/plain; charset=utf-8'}


def route_not_found(error):
    return jsonify({
        'success': False,
        'message': 'Route Not Found',
        'path': request.full_path.rstrip('?'),
        'method': request.method,
    }), 404


def handle_error(error):
    """Single exit point for every failure raised while handling a request."""
    settings: Settings = current_app.config['SETTINGS']
    info = describe_error(error)
    stack = ''.join(traceback.format_exception(type(error), error, error.__traceback__))

    logger.error(f"[ERROR]: {error}\n{stack}")

    body = {'success': False, 'message': info.message}
    if not settings.is_production:
        body['stack'] = stack
    return jsonify(body), info.status


def _limited_request_id() -> str:
    """Endpoint name, or the path for requests that matched no route."""
    return request.endpoint or request.path


def _start_timer():
    g.request_started = time.perf_counter()


def _log_request(response):
    started = g.pop('request_started', None)
    elapsed = (time.perf_counter() - started) * 1000 if started is not None else 0.0
    logger.info(f"{request.method} {request.full_path.rstrip('?')} {response.status_code} - {elapsed:.1f} ms")
    return response


def create_app(settings: Optional[Settings] = None,
               redis_client: Optional[redis.Redis] = None) -> Flask:
    """Build the application with its middleware, routes and error responders."""
    if settings is None:
        settings = Settings.from_env()
    if redis_client is None:
        redis_client = get_client(settings.redis_url)

    app = Flask(__name__)
    app.config['SETTINGS'] = settings

    # Trust the configured number of reverse-proxy hops for client address and scheme.
    if settings.trust_proxy_hops:
        hops = settings.trust_proxy_hops
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)

    # An empty origin list means no CORS headers, so browsers keep requests same-origin.
    CORS(app, origins=settings.cors_origins, supports_credentials=True)

    # One fixed window shared by every endpoint, keyed by client address.
    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        request_identifier=_limited_request_id,
        storage_uri=settings.rate_limit_storage_uri,
        application_limits=[settings.rate_limit],
        strategy="fixed-window",
        headers_enabled=True,
    )
    app.extensions['auth_limiter'] = limiter

    configure_tokens(app, settings)

    store = AccountStore(redis_client)
    app.extensions['account_store'] = store
    app.extensions['auth_service'] = AuthService(
        store, PasswordHasher(settings.password_hash_method)
    )

    app.before_request(_start_timer)
    app.after_request(_log_request)

    app.add_url_rule('/api/test', 'liveness', liveness, methods=['GET'])
    app.register_blueprint(auth_bp)

    app.register_error_handler(404, route_not_found)
    app.register_error_handler(Exception, handle_error)

    return app


class TimeoutRequestHandler(WSGIRequestHandler):
    """Drops connections idle for longer than SERVER_TIMEOUT seconds."""
    timeout = SERVER_TIMEOUT


def main() -> int:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"Fatal boot error: {e}")
        return 1

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    redis_client = get_client(settings.redis_url)
    app = create_app(settings, redis_client)

    if not init_db(redis_client) and settings.db_fail_fast:
        logger.error("Store unavailable and DB_FAIL_FAST is set; exiting")
        return 1

    logger.info(f"Server running on {settings.host}:{settings.port}")
    app.run(
        host=settings.host,
        port=settings.port,
        debug=False,
        threaded=True,
        request_handler=TimeoutRequestHandler,
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
