from typing import get_args

import pytest

from models.company import NOTIFICATION_PROVIDERS
from models.message import MESSAGE_ROLES
from models.thread import THREAD_ORIGINS
from schemas import MAX_ID, AgentListQuery, Origin, Provider, Role, SendToAgentRequest, parse_body
from services.errors import ValidationError


def test_enums_follow_model_values():
    assert get_args(Origin) == THREAD_ORIGINS
    assert get_args(Role) == MESSAGE_ROLES
    assert get_args(Provider) == NOTIFICATION_PROVIDERS


def test_send_to_agent_accepts_largest_id():
    data = parse_body(SendToAgentRequest, {
        "content": "hi", "origin": "whatsapp", "phone": "+15551234567", "agentId": MAX_ID,
    })
    assert data.agent_id == MAX_ID


@pytest.mark.parametrize("agent_id", [MAX_ID + 1, 0, True, "7", 7.5])
def test_send_to_agent_rejects_bad_ids(agent_id):
    with pytest.raises(ValidationError) as exc:
        parse_body(SendToAgentRequest, {
            "content": "hi", "origin": "whatsapp", "phone": "+15551234567", "agentId": agent_id,
        })
    assert [e["field"] for e in exc.value.errors] == ["agentId"]


def test_query_ids_are_coerced_from_text():
    assert AgentListQuery.model_validate({"companyId": "12"}).company_id == 12
