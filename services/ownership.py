from extensions import db
from models.company import Company
from models.agent import Agent
from models.thread import Thread
from models.message import Message
from services.errors import NotFound

# Every lookup below answers "not found" for rows the caller does not own,
# so a foreign id is indistinguishable from a missing one.


def _owned_company_ids(current_user):
    return db.select(Company.id).where(Company.user_id == current_user.id)


def _owned_agent_ids(current_user):
    return db.select(Agent.id).where(Agent.company_id.in_(_owned_company_ids(current_user)))


def _owned_thread_ids(current_user):
    return db.select(Thread.id).where(Thread.agent_id.in_(_owned_agent_ids(current_user)))


def get_company_query(current_user):
    """Base query for the companies owned by current_user."""
    return Company.query.filter(Company.user_id == current_user.id)


def get_agent_query(current_user):
    """Base query for agents that belong to one of current_user's companies."""
    return Agent.query.filter(Agent.company_id.in_(_owned_company_ids(current_user)))


def get_thread_query(current_user):
    return Thread.query.filter(Thread.agent_id.in_(_owned_agent_ids(current_user)))


def get_message_query(current_user):
    return Message.query.filter(Message.thread_id.in_(_owned_thread_ids(current_user)))


def get_owned_company(current_user, company_id, message='Company not found'):
    company = get_company_query(current_user).filter(Company.id == company_id).first()
    if not company:
        raise NotFound(message)
    return company


def get_owned_agent(current_user, agent_id, message='Agent not found'):
    agent = get_agent_query(current_user).filter(Agent.id == agent_id).first()
    if not agent:
        raise NotFound(message)
    return agent


def get_owned_thread(current_user, thread_id, message='Thread not found'):
    thread = get_thread_query(current_user).filter(Thread.id == thread_id).first()
    if not thread:
        raise NotFound(message)
    return thread


def get_owned_message(current_user, message_id):
    message = get_message_query(current_user).filter(Message.id == message_id).first()
    if not message:
        raise NotFound('Message not found')
    return message
