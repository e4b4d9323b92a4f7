from flask import Blueprint, request, jsonify, current_app
import logging

from extensions import db
from models.message import Message
from routes.auth_routes import token_required
from schemas import MessageCreate, MessageListQuery, SendToAgentRequest, parse_body, parse_query
from services.conversation import send_message_to_agent
from services.ownership import get_message_query, get_owned_message, get_owned_thread
from services.pagination import paginate, page_payload

logger = logging.getLogger(__name__)

message_bp = Blueprint("messages", __name__)


@message_bp.route("/messages", methods=["POST"])
@token_required
def create_message(current_user):
    data = parse_body(MessageCreate, request.get_json(silent=True))
    thread = get_owned_thread(current_user, data.thread_id)

    message = Message(thread_id=thread.id, role=data.role, content=data.content)
    db.session.add(message)
    db.session.flush()

    reply = Message(thread_id=thread.id, role="assistant", content=current_app.config["AUTO_REPLY_MESSAGE"])
    db.session.add(reply)
    db.session.commit()

    logger.info("Message %s created for thread %s with role %s", message.id, thread.id, message.role)
    return jsonify({
        "success": True,
        "message": "Message created successfully",
        "data": {"message": message.to_dict(), "assistantMessage": reply.to_dict()}
    }), 201


@message_bp.route("/messages", methods=["GET"])
@token_required
def get_messages(current_user):
    params = parse_query(MessageListQuery, request.args)

    query = get_message_query(current_user)
    if params.thread_id:
        query = query.filter(Message.thread_id == params.thread_id)
    if params.role:
        query = query.filter(Message.role == params.role)
    if params.search:
        query = query.filter(Message.content.ilike(f"%{params.search}%"))
    query = query.order_by(Message.created_at.asc(), Message.id.asc())

    messages, pagination = paginate(query, params.page, params.limit)
    return jsonify({
        "success": True,
        "message": "Messages retrieved successfully",
        "data": page_payload("messages", [m.to_dict() for m in messages], pagination)
    }), 200


@message_bp.route("/messages/<id:message_id>", methods=["GET"])
@token_required
def get_message(current_user, message_id):
    message = get_owned_message(current_user, message_id)
    return jsonify({
        "success": True,
        "message": "Message retrieved successfully",
        "data": {"message": message.to_dict()}
    }), 200


@message_bp.route("/messages/send-to-agent", methods=["POST"])
@token_required
def send_to_agent(current_user):
    data = parse_body(SendToAgentRequest, request.get_json(silent=True))
    logger.info("Inbound %s message for agent %s", data.origin, data.agent_id)

    result = send_message_to_agent(data, notifier=current_app.extensions.get("notifier"))

    return jsonify({
        "success": True,
        "message": "Message sent to agent successfully",
        "data": result
    }), 201
