"""Direct message endpoints (legacy inbox) for the Veilpost API."""

from fastapi import APIRouter

from veilpost.schemas.common import ApiResponse
from veilpost.schemas.direct_message import (
    DirectMessageCreate,
    DirectMessageOut,
    MessagesEnvelope,
)
from veilpost.schemas.user import AcceptMessagesEnvelope, AcceptMessagesRequest
from veilpost.services import messages as message_service
from veilpost.services.user_service import set_accepting_messages

from ..dependencies import ClientIdDep, CurrentUserDep, RateLimiterDep, SessionDep

router = APIRouter(tags=["messages"])


@router.get("/accept-messages", response_model=AcceptMessagesEnvelope)
async def get_accept_messages(current_user: CurrentUserDep) -> AcceptMessagesEnvelope:
    """Report whether the caller accepts direct messages."""
    return AcceptMessagesEnvelope(is_accepting_messages=current_user.is_accepting_messages)


@router.post("/accept-messages", response_model=AcceptMessagesEnvelope)
async def update_accept_messages(
    preference: AcceptMessagesRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AcceptMessagesEnvelope:
    """Open or close the caller's inbox."""
    accepting = set_accepting_messages(db, current_user, preference.accept_messages)
    return AcceptMessagesEnvelope(
        message="Message preferences updated successfully",
        is_accepting_messages=accepting,
    )


@router.post("/send-message", response_model=ApiResponse)
async def send_message(
    message_data: DirectMessageCreate,
    db: SessionDep,
    limiter: RateLimiterDep,
    client_id: ClientIdDep,
) -> ApiResponse:
    """Send an anonymous message to a user. No authentication is required."""
    limiter.enforce("message", client_id)
    message_service.send_message(db, message_data.username, message_data.content)
    return ApiResponse(message="Message sent successfully")


@router.get("/get-messages", response_model=MessagesEnvelope)
async def get_messages(current_user: CurrentUserDep, db: SessionDep) -> MessagesEnvelope:
    """Return the caller's inbox, newest first."""
    messages = message_service.list_messages(db, current_user)
    return MessagesEnvelope(
        messages=[DirectMessageOut.model_validate(message) for message in messages],
    )


@router.delete("/delete-message/{message_id}", response_model=ApiResponse)
async def delete_message(
    message_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ApiResponse:
    """Delete one of the caller's messages."""
    message_service.delete_message(db, current_user, message_id)
    return ApiResponse(message="Message deleted")
