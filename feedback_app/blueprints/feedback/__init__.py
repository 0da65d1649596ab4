from flask import Blueprint

bp = Blueprint("feedback", __name__)

# Import submodules so their @bp.route decorators register
from . import routes  # noqa: E402,F401
