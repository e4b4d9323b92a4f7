from flask import Blueprint, request, jsonify
from sqlalchemy import or_
import logging

from extensions import db
from models.agent import Agent
from routes.auth_routes import token_required
from schemas import AgentCreate, AgentUpdate, AgentListQuery, parse_body, parse_query
from services.errors import Conflict
from services.ownership import get_agent_query, get_owned_agent, get_owned_company
from services.pagination import paginate, page_payload

logger = logging.getLogger(__name__)

agent_bp = Blueprint('agents', __name__)

COMPANY_DENIED = 'Company not found or access denied'


def _name_taken(company_id, name, exclude_id=None):
    query = Agent.query.filter(Agent.company_id == company_id, Agent.name == name)
    if exclude_id is not None:
        query = query.filter(Agent.id != exclude_id)
    return db.session.query(query.exists()).scalar()


@agent_bp.route('/agents', methods=['POST'])
@token_required
def create_agent(current_user):
    data = parse_body(AgentCreate, request.get_json(silent=True))

    # The target company must belong to the caller
    company = get_owned_company(current_user, data.company_id, message=COMPANY_DENIED)

    if _name_taken(company.id, data.name):
        raise Conflict('Agent with this name already exists in this company')

    agent = Agent(name=data.name, description=data.description, company_id=company.id)
    db.session.add(agent)
    db.session.commit()

    logger.info("Agent created: %s for company %s", agent.id, company.id)
    return jsonify({
        'success': True,
        'message': 'Agent created successfully',
        'data': agent.to_dict()
    }), 201


@agent_bp.route('/agents', methods=['GET'])
@token_required
def get_agents(current_user):
    params = parse_query(AgentListQuery, request.args)

    query = get_agent_query(current_user)
    if params.company_id:
        query = query.filter(Agent.company_id == params.company_id)
    if params.search:
        query = query.filter(or_(
            Agent.name.ilike(f"%{params.search}%"),
            Agent.description.ilike(f"%{params.search}%"),
        ))
    query = query.order_by(Agent.created_at.desc(), Agent.id.desc())

    agents, pagination = paginate(query, params.page, params.limit)
    logger.info("Retrieved %d agents for user %s", len(agents), current_user.id)
    return jsonify({
        'success': True,
        'message': 'Agents retrieved successfully',
        'data': page_payload('agents', [a.to_dict() for a in agents], pagination)
    }), 200


@agent_bp.route('/agents/<id:agent_id>', methods=['GET'])
@token_required
def get_agent(current_user, agent_id):
    agent = get_owned_agent(current_user, agent_id, message='Agent not found or access denied')
    return jsonify({
        'success': True,
        'message': 'Agent retrieved successfully',
        'data': agent.to_dict()
    }), 200


@agent_bp.route('/agents/<id:agent_id>', methods=['PUT'])
@token_required
def update_agent(current_user, agent_id):
    data = parse_body(AgentUpdate, request.get_json(silent=True))
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    # A move to another company requires owning the destination, checked before any write
    if 'company_id' in changes:
        get_owned_company(current_user, changes['company_id'], message=COMPANY_DENIED)

    agent = get_owned_agent(current_user, agent_id, message='Agent not found or access denied')

    target_company_id = changes.get('company_id', agent.company_id)
    target_name = changes.get('name', agent.name)
    if ('name' in changes or 'company_id' in changes) and _name_taken(target_company_id, target_name, exclude_id=agent.id):
        raise Conflict('Agent with this name already exists in this company')

    if 'name' in changes: agent.name = changes['name']
    if 'description' in changes: agent.description = changes['description']
    if 'company_id' in changes: agent.company_id = changes['company_id']

    db.session.commit()

    logger.info("Agent updated: %s for user %s", agent.id, current_user.id)
    return jsonify({
        'success': True,
        'message': 'Agent updated successfully',
        'data': agent.to_dict()
    }), 200


@agent_bp.route('/agents/<id:agent_id>', methods=['DELETE'])
@token_required
def delete_agent(current_user, agent_id):
    agent = get_owned_agent(current_user, agent_id, message='Agent not found or access denied')
    deleted = {'id': agent.id, 'name': agent.name}

    db.session.delete(agent)
    db.session.commit()

    logger.info("Agent deleted: %s for user %s", deleted['id'], current_user.id)
    return jsonify({
        'success': True,
        'message': 'Agent deleted successfully',
        'data': deleted
    }), 200
