from .auth_routes import auth_bp
from .user_routes import user_bp
from .company_routes import company_bp
from .agent_routes import agent_bp
from .contact_routes import contact_bp
from .thread_routes import thread_bp
from .message_routes import message_bp
from .utils_routes import utils_bp
