from flask import Blueprint, request, jsonify
from sqlalchemy import or_
import logging

from extensions import db
from models.contact import Contact
from routes.auth_routes import token_required
from schemas import ContactCreate, ListQuery, parse_body, parse_query
from services.errors import Conflict, NotFound
from services.pagination import paginate, page_payload

logger = logging.getLogger(__name__)

contact_bp = Blueprint('contacts', __name__)


@contact_bp.route('/contacts', methods=['POST'])
@token_required
def create_contact(current_user):
    data = parse_body(ContactCreate, request.get_json(silent=True))

    # Explicit creation refuses duplicates, inbound resolution does not
    if data.email and Contact.query.filter_by(email=data.email).first():
        raise Conflict('Contact with this email already exists')
    if data.phone and Contact.query.filter_by(phone=data.phone).first():
        raise Conflict('Contact with this phone already exists')

    contact = Contact(name=data.name, email=data.email, phone=data.phone)
    db.session.add(contact)
    db.session.commit()

    logger.info("Contact created: %s", contact.id)
    return jsonify({
        'success': True,
        'message': 'Contact created successfully',
        'data': {'contact': contact.to_dict()}
    }), 201


@contact_bp.route('/contacts', methods=['GET'])
@token_required
def get_contacts(current_user):
    params = parse_query(ListQuery, request.args)

    query = Contact.query
    if params.search:
        query = query.filter(or_(
            Contact.name.ilike(f"%{params.search}%"),
            Contact.email.ilike(f"%{params.search}%"),
            Contact.phone.ilike(f"%{params.search}%"),
        ))
    query = query.order_by(Contact.created_at.desc(), Contact.id.desc())

    contacts, pagination = paginate(query, params.page, params.limit)
    return jsonify({
        'success': True,
        'message': 'Contacts retrieved successfully',
        'data': page_payload('contacts', [c.to_dict() for c in contacts], pagination)
    }), 200


@contact_bp.route('/contacts/<id:contact_id>', methods=['GET'])
@token_required
def get_contact(current_user, contact_id):
    contact = db.session.get(Contact, contact_id)
    if not contact:
        raise NotFound('Contact not found')

    return jsonify({
        'success': True,
        'message': 'Contact retrieved successfully',
        'data': {'contact': contact.to_dict()}
    }), 200
