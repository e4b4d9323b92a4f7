from flask import Blueprint, request, jsonify, g
from functools import wraps
import logging

import jwt

from extensions import db
from models.user import User
from schemas import RegisterRequest, LoginRequest, parse_body
from services.errors import Conflict, Unauthenticated, InvalidToken, UnknownSubject
from services.token_service import generate_token, verify_token

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _extract_token():
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        return None

    if auth_header.startswith("Bearer "):
        parts = auth_header.split()  # Splits on any whitespace
        if len(parts) < 2:
            return None
        token = parts[1]
        # Handle double 'Bearer' (common Postman mistake)
        if token.lower() == 'bearer' and len(parts) > 2:
            token = parts[2]
    else:
        # Fallback: Allow token even if 'Bearer' prefix is missing
        token = auth_header.strip()

    # Strip quotes (common copy-paste mistake)
    return token.strip('"').strip("'") or None


def authenticate_request():
    """
    Resolves the caller from the bearer token and attaches it to g.current_user.
    Raises Unauthenticated, InvalidToken or UnknownSubject.
    """
    token = _extract_token()
    if not token:
        raise Unauthenticated()

    try:
        data = verify_token(token)
    except jwt.InvalidTokenError as e:
        # Bad signature, malformed and expired tokens all look the same to the client
        logger.info("Token rejected: %s", e)
        raise InvalidToken()

    current_user = db.session.get(User, data['user_id'])
    if not current_user:
        raise UnknownSubject()

    g.current_user = {'id': current_user.id, 'email': current_user.email, 'name': current_user.name}
    g.user_id = current_user.id
    return current_user


# Decorator to verify JWT token
def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user = authenticate_request()
        return f(current_user, *args, **kwargs)
    return decorated


def token_optional(f):
    """Same as token_required but never rejects: current_user is None on any failure."""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            current_user = authenticate_request()
        except Unauthenticated:
            current_user = None
            g.current_user = None
        return f(current_user, *args, **kwargs)
    return decorated


# ---------------- REGISTER ----------------
@auth_bp.route("/register", methods=["POST"])
def register():
    data = parse_body(RegisterRequest, request.get_json(silent=True))

    if User.query.filter_by(email=data.email).first():
        raise Conflict("User with this email already exists")

    user = User(name=data.name, email=data.email)
    user.set_password(data.password)
    db.session.add(user)
    db.session.commit()

    logger.info("User registered: %s", user.id)
    return jsonify({
        "success": True,
        "message": "User registered successfully",
        "data": {"user": user.to_dict(), "token": generate_token(user)}
    }), 201


# ---------------- LOGIN ----------------
@auth_bp.route("/login", methods=["POST"])
def login():
    data = parse_body(LoginRequest, request.get_json(silent=True))

    user = User.query.filter_by(email=data.email).first()

    # Verify credentials
    if not user or not user.check_password(data.password):
        logger.info("Failed login attempt for %s", data.email)
        raise Unauthenticated("Invalid email or password")

    logger.info("User logged in: %s", user.id)
    return jsonify({
        "success": True,
        "message": "Login successful",
        "data": {"user": user.to_dict(), "token": generate_token(user)}
    }), 200


# ---------------- ME ----------------
@auth_bp.route("/me", methods=["GET"])
@token_required
def me(current_user):
    return jsonify({
        "success": True,
        "message": "User retrieved successfully",
        "data": {"user": current_user.to_dict()}
    }), 200
