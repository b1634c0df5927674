from flask import Blueprint

bp = Blueprint('main', __name__)

@bp.route('/health')
def health():
    """Liveness probe; every other HTTP path is a 404."""
    return "ok", 200, {'Content-Type': 'text/plain; charset=utf-8'}
