from flask import Blueprint, request, jsonify
import logging

from extensions import db
from models.contact import Contact
from models.message import Message
from models.thread import Thread
from routes.auth_routes import token_required
from schemas import ThreadCreate, ThreadListQuery, parse_body, parse_query
from services.errors import NotFound
from services.ownership import get_owned_agent, get_owned_thread, get_thread_query
from services.pagination import paginate, page_payload

logger = logging.getLogger(__name__)

thread_bp = Blueprint('threads', __name__)

PREVIEW_LENGTH = 100


def _last_messages(thread_ids):
    """Maps thread id -> preview of its most recent message."""
    if not thread_ids:
        return {}

    latest = (
        db.session.query(Message.thread_id, db.func.max(Message.id).label('message_id'))
        .filter(Message.thread_id.in_(thread_ids))
        .group_by(Message.thread_id)
        .subquery()
    )
    rows = Message.query.join(latest, Message.id == latest.c.message_id).all()

    previews = {}
    for m in rows:
        content = m.content or ''
        previews[m.thread_id] = {
            'content': content[:PREVIEW_LENGTH] + '...' if len(content) > PREVIEW_LENGTH else content,
            'role': m.role,
            'createdAt': m.created_at.isoformat() if m.created_at else None,
        }
    return previews


def _thread_detail(thread, last_message=None):
    contact = thread.contact
    agent = thread.agent
    return {
        'id': thread.id,
        'contact': {
            'id': contact.id,
            'name': contact.name,
            'email': contact.email,
            'phone': contact.phone,
        },
        'agent': {
            'id': agent.id,
            'name': agent.name,
            'description': agent.description,
        },
        'name': thread.name,
        'origin': thread.origin,
        'lastMessage': last_message,
        'createdAt': thread.created_at.isoformat() if thread.created_at else None,
        'updatedAt': thread.updated_at.isoformat() if thread.updated_at else None,
    }


@thread_bp.route('/threads', methods=['POST'])
@token_required
def create_thread(current_user):
    data = parse_body(ThreadCreate, request.get_json(silent=True))

    contact = db.session.get(Contact, data.contact_id)
    if not contact:
        raise NotFound('Contact not found')
    agent = get_owned_agent(current_user, data.agent_id)

    thread = Thread(contact_id=contact.id, agent_id=agent.id, name=data.name, origin=data.origin)
    db.session.add(thread)
    db.session.commit()

    logger.info("Thread created: %s for contact %s and agent %s from %s", thread.id, contact.id, agent.id, thread.origin)
    return jsonify({
        'success': True,
        'message': 'Thread created successfully',
        'data': {'thread': thread.to_dict()}
    }), 201


@thread_bp.route('/threads', methods=['GET'])
@token_required
def get_threads(current_user):
    params = parse_query(ThreadListQuery, request.args)

    query = get_thread_query(current_user)
    if params.contact_id:
        query = query.filter(Thread.contact_id == params.contact_id)
    if params.agent_id:
        query = query.filter(Thread.agent_id == params.agent_id)
    if params.origin:
        query = query.filter(Thread.origin == params.origin)
    if params.search:
        query = query.filter(Thread.name.ilike(f"%{params.search}%"))
    query = query.order_by(Thread.created_at.desc(), Thread.id.desc())

    threads, pagination = paginate(query, params.page, params.limit)
    previews = _last_messages([t.id for t in threads])

    logger.info("Retrieved %d threads (page %d/%d)", len(threads), pagination['currentPage'], pagination['totalPages'])
    return jsonify({
        'success': True,
        'message': 'Threads retrieved successfully',
        'data': page_payload('threads', [_thread_detail(t, previews.get(t.id)) for t in threads], pagination)
    }), 200


@thread_bp.route('/threads/<id:thread_id>', methods=['GET'])
@token_required
def get_thread(current_user, thread_id):
    thread = get_owned_thread(current_user, thread_id)
    return jsonify({
        'success': True,
        'message': 'Thread retrieved successfully',
        'data': {'thread': _thread_detail(thread, _last_messages([thread.id]).get(thread.id))}
    }), 200
