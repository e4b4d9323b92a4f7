from flask import Blueprint, request, jsonify
from sqlalchemy import or_

from models.user import User
from routes.auth_routes import token_required
from schemas import ListQuery, parse_query
from services.pagination import paginate, page_payload

user_bp = Blueprint('users', __name__)


@user_bp.route('/users', methods=['GET'])
@token_required
def get_users(current_user):
    params = parse_query(ListQuery, request.args)

    query = User.query
    if params.search:
        query = query.filter(or_(
            User.name.ilike(f"%{params.search}%"),
            User.email.ilike(f"%{params.search}%"),
        ))
    query = query.order_by(User.created_at.desc(), User.id.desc())

    users, pagination = paginate(query, params.page, params.limit)
    return jsonify({
        "success": True,
        "message": "Users retrieved successfully",
        "data": page_payload("users", [u.to_dict() for u in users], pagination)
    }), 200
