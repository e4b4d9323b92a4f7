"""
Inbound message handling for agents.

An inbound message is attached to a contact (found by phone for WhatsApp,
by email for every other origin) and to a thread that groups the contact's
messages with one agent on one origin over a rolling 24 hour window.
"""
import logging
from datetime import datetime, timedelta

from flask import current_app

from extensions import db
from models.agent import Agent
from models.contact import Contact
from models.thread import Thread
from models.message import Message
from services.errors import NotFound
from services.notifier import NullNotifier, agent_channel

logger = logging.getLogger(__name__)

THREAD_WINDOW = timedelta(hours=24)
THREAD_NAME_MAX_LENGTH = 200
CONTACT_NAME_MAX_LENGTH = 100


def resolve_contact(origin, email=None, phone=None):
    """
    Finds the first contact matching the channel key for the origin, or creates one.
    Only the origin's key is used for matching, the other field is ignored.
    Returns (contact, is_new).
    """
    if origin == 'whatsapp':
        contact = Contact.query.filter_by(phone=phone).order_by(Contact.id).first()
    else:
        contact = Contact.query.filter_by(email=email).order_by(Contact.id).first()

    if contact:
        logger.info("Existing contact found: %s", contact.id)
        return contact, False

    if origin == 'whatsapp':
        contact = Contact(name=phone, phone=phone, email=None)
    else:
        local_part = email.split('@')[0] if email and '@' in email else ''
        contact = Contact(name=local_part[:CONTACT_NAME_MAX_LENGTH] or '-', email=email, phone=None)

    db.session.add(contact)
    db.session.flush()
    logger.info("New contact created: %s", contact.id)
    return contact, True


def resolve_thread(contact, agent, origin, content, now=None):
    """
    Returns (thread, is_new) for the newest thread of (contact, agent, origin)
    created inside the trailing window, creating one named after content otherwise.
    """
    now = now or datetime.utcnow()
    window_start = now - THREAD_WINDOW

    thread = (
        Thread.query
        .filter(
            Thread.contact_id == contact.id,
            Thread.agent_id == agent.id,
            Thread.origin == origin,
            Thread.created_at >= window_start,
        )
        .order_by(Thread.created_at.desc(), Thread.id.desc())
        .first()
    )
    if thread:
        logger.info("Using existing thread %s (created at %s)", thread.id, thread.created_at)
        return thread, False

    thread = Thread(
        contact_id=contact.id,
        agent_id=agent.id,
        name=content[:THREAD_NAME_MAX_LENGTH],
        origin=origin,
        created_at=now,
        updated_at=now,
    )
    db.session.add(thread)
    db.session.flush()
    logger.info("New thread created: %s", thread.id)
    return thread, True


def write_conversation(thread, content, reply=None):
    """Appends the inbound user message and the canned assistant reply."""
    reply = reply or current_app.config['AUTO_REPLY_MESSAGE']

    user_message = Message(thread_id=thread.id, role='user', content=content)
    db.session.add(user_message)
    db.session.flush()

    assistant_message = Message(thread_id=thread.id, role='assistant', content=reply)
    db.session.add(assistant_message)
    db.session.flush()

    return user_message, assistant_message


def send_message_to_agent(payload, notifier=None, now=None):
    """
    Runs the inbound flow for a validated SendToAgentRequest.

    Contact, thread and both messages are written in one transaction: a
    failure in any step rolls back every row written before it.
    """
    notifier = notifier or NullNotifier()

    agent = db.session.get(Agent, payload.agent_id)
    if not agent:
        logger.warning("Agent not found with ID: %s", payload.agent_id)
        raise NotFound('Agent not found')

    try:
        contact, _ = resolve_contact(payload.origin, email=payload.email, phone=payload.phone)
        thread, is_new_thread = resolve_thread(contact, agent, payload.origin, payload.content, now=now)
        user_message, assistant_message = write_conversation(thread, payload.content)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "Message sent to agent %s: thread=%s contact=%s user_message=%s assistant_message=%s",
        agent.id, thread.id, contact.id, user_message.id, assistant_message.id,
    )

    result = {
        'userMessage': user_message.to_dict(),
        'assistantMessage': assistant_message.to_dict(),
        'thread': {
            'id': thread.id,
            'name': thread.name,
            'origin': thread.origin,
            'isNew': is_new_thread,
        },
        'contact': {
            'id': contact.id,
            'name': contact.name,
            'email': contact.email,
            'phone': contact.phone,
        },
    }

    try:
        notifier.emit(agent_channel(agent.id), result)
    except Exception:
        logger.exception("Notification for agent %s failed", agent.id)

    return result
