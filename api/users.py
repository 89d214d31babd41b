"""User endpoints: register, login, profile."""

import secrets
from flask import Blueprint, jsonify, request
from api.context import current_user_id, get_services
from api.schemas import LoginRequest, RegisterRequest, parse_payload
from errors import NotFoundError

bp = Blueprint("users", __name__, url_prefix="/user")


@bp.route("/register", methods=["POST"])
def register():
    payload = parse_payload(RegisterRequest, request.get_json(silent=True))
    user = get_services().users.register(
        payload.username, payload.password, payload.email
    )
    return jsonify({"message": "注册成功", "user_id": user.id})


@bp.route("/login", methods=["POST"])
def login():
    payload = parse_payload(LoginRequest, request.get_json(silent=True))
    user = get_services().users.authenticate(payload.username, payload.password)

    # The token is handed to the client but never stored or checked
    token = secrets.token_hex(32)

    return jsonify({"message": "登录成功", "user": user.to_dict(), "token": token})


@bp.route("/profile", methods=["GET"])
def profile():
    user = get_services().users.find(current_user_id())
    if user is None:
        raise NotFoundError("用户不存在")
    return jsonify(user.to_dict())
