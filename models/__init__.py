from .user import User
from .company import Company
from .agent import Agent
from .contact import Contact
from .thread import Thread
from .message import Message

# Ensure all models are imported here so SQLAlchemy knows about them
