# Request schemas for the JSON API
import re
from typing import Annotated, List, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from models.company import NOTIFICATION_PROVIDERS
from models.message import MESSAGE_ROLES
from models.thread import THREAD_ORIGINS
from services.errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")
HEX_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
IMAGE_URL_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*\.(jpg|jpeg|png|gif|svg|webp)(\?\S*)?$", re.IGNORECASE)

Origin = Literal[THREAD_ORIGINS]
Role = Literal[MESSAGE_ROLES]
Provider = Literal[NOTIFICATION_PROVIDERS]

# Largest value a signed 64-bit INTEGER column can hold
MAX_ID = 2**63 - 1
EMAIL_MAX_LENGTH = 120


def _email(value):
    if not EMAIL_RE.match(value):
        raise ValueError("Please provide a valid email address")
    return value


def _phone(value):
    if not PHONE_RE.match(value):
        raise ValueError("Invalid phone number format")
    return value


def _hex_color(value):
    if not HEX_COLOR_RE.match(value):
        raise ValueError("Please provide a valid hex color (e.g., #FF5733 or #F57)")
    return value


def _image_url(value):
    if not IMAGE_URL_RE.match(value):
        raise ValueError("Please provide a valid image URL")
    return value


Email = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_lower=True, max_length=EMAIL_MAX_LENGTH),
    AfterValidator(_email),
]
Phone = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_phone)]
HexColor = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_hex_color)]
ImageUrl = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_image_url)]
Content = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=10000)]
# JSON bodies must carry real integers, query strings are always text
ObjectId = Annotated[int, Field(gt=0, le=MAX_ID, strict=True)]
QueryId = Annotated[int, Field(gt=0, le=MAX_ID)]


class ApiSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --- Auth ---

class RegisterRequest(ApiSchema):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
    email: Email
    password: Annotated[str, StringConstraints(min_length=6, max_length=128)]


class LoginRequest(ApiSchema):
    email: Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=1)]
    password: Annotated[str, StringConstraints(min_length=1)]


# --- Companies ---

class NotificationIn(ApiSchema):
    provider: Provider
    value: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    enabled: bool = True


def _unique_providers(notifications):
    providers = [n.provider for n in notifications]
    if len(providers) != len(set(providers)):
        raise ValueError("Each notification provider can only be used once per company")
    return notifications


Notifications = Annotated[List[NotificationIn], AfterValidator(_unique_providers)]


class CompanyCreate(ApiSchema):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
    notifications: Notifications = Field(default_factory=list)
    brand_logo_url: ImageUrl = Field(alias="brandLogoUrl")
    brand_color: HexColor = Field(alias="brandColor")


class CompanyUpdate(ApiSchema):
    name: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]] = None
    notifications: Optional[Notifications] = None
    brand_logo_url: Optional[ImageUrl] = Field(default=None, alias="brandLogoUrl")
    brand_color: Optional[HexColor] = Field(default=None, alias="brandColor")


# --- Agents ---

AgentName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
AgentDescription = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=500)]


class AgentCreate(ApiSchema):
    name: AgentName
    description: AgentDescription
    company_id: ObjectId = Field(alias="companyId")


class AgentUpdate(ApiSchema):
    name: Optional[AgentName] = None
    description: Optional[AgentDescription] = None
    company_id: Optional[ObjectId] = Field(default=None, alias="companyId")


# --- Contacts / Threads / Messages ---

class ContactCreate(ApiSchema):
    name: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]] = None
    email: Optional[Email] = None
    phone: Optional[Phone] = None


class ThreadCreate(ApiSchema):
    contact_id: ObjectId = Field(alias="contactId")
    agent_id: ObjectId = Field(alias="agentId")
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=200)]
    origin: Origin


class MessageCreate(ApiSchema):
    thread_id: ObjectId = Field(alias="threadId")
    role: Role
    content: Content


class SendToAgentRequest(ApiSchema):
    content: Content
    origin: Origin
    email: Optional[Email] = Field(default=None, validate_default=True)
    phone: Optional[Phone] = Field(default=None, validate_default=True)
    agent_id: ObjectId = Field(alias="agentId")

    @field_validator("email")
    @classmethod
    def email_required_off_whatsapp(cls, value, info: ValidationInfo):
        origin = info.data.get("origin")
        if origin and origin != "whatsapp" and not value:
            raise ValueError("Email is required for non-WhatsApp origins")
        return value

    @field_validator("phone")
    @classmethod
    def phone_required_for_whatsapp(cls, value, info: ValidationInfo):
        if info.data.get("origin") == "whatsapp" and not value:
            raise ValueError("Phone is required for WhatsApp origin")
        return value


# --- Query strings ---

class ListQuery(ApiSchema):
    page: Annotated[int, Field(ge=1)] = 1
    limit: Annotated[int, Field(ge=1, le=100)] = 10
    search: Optional[Annotated[str, StringConstraints(strip_whitespace=True, max_length=200)]] = None


class AgentListQuery(ListQuery):
    company_id: Optional[QueryId] = Field(default=None, alias="companyId")


class ThreadListQuery(ListQuery):
    contact_id: Optional[QueryId] = Field(default=None, alias="contactId")
    agent_id: Optional[QueryId] = Field(default=None, alias="agentId")
    origin: Optional[Origin] = None


class MessageListQuery(ListQuery):
    thread_id: Optional[QueryId] = Field(default=None, alias="threadId")
    role: Optional[Role] = None


# --- Helpers ---

def format_errors(exc):
    errors = []
    for err in exc.errors():
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": message,
        })
    return errors


def parse_body(schema, data):
    """Validates a JSON body against schema, raising ValidationError with field detail."""
    if data is None:
        raise ValidationError("Invalid JSON or Content-Type not set to application/json")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError("Validation error", errors=format_errors(e))


def parse_query(schema, args):
    try:
        return schema.model_validate(args.to_dict())
    except PydanticValidationError as e:
        raise ValidationError("Invalid query parameters", errors=format_errors(e))
