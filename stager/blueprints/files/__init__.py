from flask import Blueprint

files_bp = Blueprint("files", __name__)

from stager.blueprints.files import views  # noqa: F401, E402
