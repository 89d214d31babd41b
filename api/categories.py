"""Category endpoints."""

from flask import Blueprint, jsonify, request
from api.context import get_services

bp = Blueprint("categories", __name__, url_prefix="/category")


@bp.route("/list", methods=["GET"])
def list_categories():
    categories = get_services().categories.find_all(request.args.get("type"))
    return jsonify([category.to_dict() for category in categories])
