"""
api/v3_bp.py   Write API (v3)
========================================================
Mounted at <RELATIVE_PATH>/api/v3/

Every response uses the v3 envelope from core.api_response; errors raised
here are formatted the same way by the error stage.
"""

from flask import Blueprint

from core.api_response import format_api_response
from core.response import ResponseWriter

v3_bp = Blueprint('api_v3', __name__)


@v3_bp.route('/ping', methods=['GET', 'POST'])
def ping():
    """
    Liveness check for API clients
    ---
    tags: [Utilities]
    responses:
      200:
        description: pong
    """
    return format_api_response(200, ResponseWriter(), {'pong': True})
