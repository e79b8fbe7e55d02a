# sholat/routes/main_routes.py

from flask_smorest import Blueprint

from ..schemas import MessageSchema

main_bp = Blueprint('Main', __name__, url_prefix='/')


@main_bp.route('/')
@main_bp.response(200, MessageSchema)
def index():
    """
    Main endpoint for the API.
    """
    return {"message": "Welcome to the Sholat prayer times API! See /api/prayer-times."}
