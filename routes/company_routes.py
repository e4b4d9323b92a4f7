from flask import Blueprint, request, jsonify
import logging

from extensions import db
from models.company import Company
from routes.auth_routes import token_required
from schemas import CompanyCreate, CompanyUpdate, ListQuery, parse_body, parse_query
from services.errors import Conflict
from services.ownership import get_company_query, get_owned_company
from services.pagination import paginate, page_payload

logger = logging.getLogger(__name__)

company_bp = Blueprint('companies', __name__)


def _name_taken(current_user, name, exclude_id=None):
    query = get_company_query(current_user).filter(Company.name == name)
    if exclude_id is not None:
        query = query.filter(Company.id != exclude_id)
    return db.session.query(query.exists()).scalar()


@company_bp.route('/companies', methods=['POST'])
@token_required
def create_company(current_user):
    data = parse_body(CompanyCreate, request.get_json(silent=True))

    if _name_taken(current_user, data.name):
        raise Conflict('Company with this name already exists for this user')

    company = Company(
        name=data.name,
        notifications=[n.model_dump() for n in data.notifications],
        brand_logo_url=data.brand_logo_url,
        brand_color=data.brand_color,
        user_id=current_user.id,
    )
    db.session.add(company)
    db.session.commit()

    logger.info("Company created: %s for user %s", company.id, current_user.id)
    return jsonify({
        'success': True,
        'message': 'Company created successfully',
        'data': company.to_dict()
    }), 201


@company_bp.route('/companies', methods=['GET'])
@token_required
def get_companies(current_user):
    params = parse_query(ListQuery, request.args)

    query = get_company_query(current_user)
    if params.search:
        query = query.filter(Company.name.ilike(f"%{params.search}%"))
    query = query.order_by(Company.created_at.desc(), Company.id.desc())

    companies, pagination = paginate(query, params.page, params.limit)
    return jsonify({
        'success': True,
        'message': 'Companies retrieved successfully',
        'data': page_payload('companies', [c.to_dict() for c in companies], pagination)
    }), 200


@company_bp.route('/companies/<id:company_id>', methods=['GET'])
@token_required
def get_company(current_user, company_id):
    company = get_owned_company(current_user, company_id)
    return jsonify({
        'success': True,
        'message': 'Company retrieved successfully',
        'data': company.to_dict()
    }), 200


@company_bp.route('/companies/<id:company_id>', methods=['PUT'])
@token_required
def update_company(current_user, company_id):
    company = get_owned_company(current_user, company_id)
    data = parse_body(CompanyUpdate, request.get_json(silent=True))
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    if 'name' in changes and _name_taken(current_user, changes['name'], exclude_id=company.id):
        raise Conflict('Company with this name already exists for this user')

    if 'name' in changes: company.name = changes['name']
    if 'notifications' in changes: company.notifications = changes['notifications']
    if 'brand_logo_url' in changes: company.brand_logo_url = changes['brand_logo_url']
    if 'brand_color' in changes: company.brand_color = changes['brand_color']

    db.session.commit()

    logger.info("Company updated: %s", company.id)
    return jsonify({
        'success': True,
        'message': 'Company updated successfully',
        'data': company.to_dict()
    }), 200


@company_bp.route('/companies/<id:company_id>', methods=['DELETE'])
@token_required
def delete_company(current_user, company_id):
    company = get_owned_company(current_user, company_id)
    deleted = {'id': company.id, 'name': company.name}

    # Agents, their threads and messages go with the company
    db.session.delete(company)
    db.session.commit()

    logger.info("Company deleted: %s", deleted['id'])
    return jsonify({
        'success': True,
        'message': 'Company deleted successfully',
        'data': deleted
    }), 200
