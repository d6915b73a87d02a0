"""
app.py   Flask Application Factory
====================================
create_app(env) bootstraps the Flask app:
  1. Loads config from config.py (plus optional overrides)
  2. Initialises extensions (logging, Babel, limiter, hooks, CORS, CSRF)
  3. Installs the before-request guards and API blueprints
  4. Installs the error stage (malformed-URI recovery + dispatcher)

Run locally:
    python app.py

Run with Gunicorn (production):
    gunicorn "app:create_app('production')" --bind 0.0.0.0:5000
"""

import datetime
import os

from flask import Flask, jsonify
from flask_cors import CORS
from flask_wtf.csrf import CSRFProtect
from dotenv import load_dotenv

load_dotenv()

from config import config_map
from core.hooks import HookRegistry
from core.i18n import init_i18n
from core.limiter import limiter
from core.logging_config import setup_logging
from core.middleware import init_middleware
from core.translator import translate
from handlers.dispatcher import register_error_handlers

csrf = CSRFProtect()


# ============================================================
# APP FACTORY
# ============================================================

def create_app(env: str = None, overrides: dict = None) -> Flask:
    if env is None:
        env = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)
    cfg = config_map.get(env, config_map['default'])
    app.config.from_object(cfg)
    if overrides:
        app.config.update(overrides)
    prefix = app.config['RELATIVE_PATH']

    # -- Extensions ------------------------------------------
    setup_logging(app)
    init_i18n(app)
    limiter.init_app(app)
    HookRegistry(app)
    CORS(app, resources={rf"{prefix}/api/*": {"origins": "*"}})

    # -- Guards (order matters: API flag first, CSRF last) ----
    init_middleware(app)
    csrf.init_app(app)

    app.add_template_filter(translate, 'translate')

    # -- API Blueprints --------------------------------------
    from api.v3_bp import v3_bp
    app.register_blueprint(v3_bp, url_prefix=f"{prefix}{app.config['API_V3_PREFIX']}")

    _register_page_routes(app, prefix)

    # -- Error stage -----------------------------------------
    register_error_handlers(app)

    print(f"\n[[OK] APP] Started in '{env}' mode (relative path: '{prefix or '/'}')\n", flush=True)
    return app


# ============================================================
# PAGE ROUTES
# ============================================================

def _register_page_routes(app: Flask, prefix: str):
    """Register browser-facing routes on the app instance."""

    # -- Health Check --------------------------------------
    @app.route(f'{prefix}/health')
    @limiter.exempt
    def health():
        return jsonify({
            'status':    'healthy',
            'hooks':     app.extensions['hooks'].count(),
            'timestamp': str(datetime.datetime.now()),
        }), 200


# ============================================================
# ENTRY POINT
# ============================================================

if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, port=5000)
