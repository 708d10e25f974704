"""
Inquiries API Router - service inquiry threads.

    POST /inquiries                          open a thread (current user is the inquirer)
    POST /inquiries/{inquiry_id}/responses   structured company response
    POST /inquiries/{inquiry_id}/followups   free-form message, either side
"""

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from community_messaging.application.commands.messaging import (
    RespondToInquiryCommand,
    RespondToInquiryHandler,
    SendFollowupCommand,
    SendFollowupHandler,
    SubmitInquiryCommand,
    SubmitInquiryHandler,
)
from community_messaging.application.dto import ThreadEntryDTO
from community_messaging.presentation.api.conversations import parse_user_id
from community_messaging.presentation.dependencies.auth import AuthUser, get_current_user


class SubmitInquiryRequest(BaseModel):
    company_id: str
    inquirer_name: str
    message: str


class InquiryMessageRequest(BaseModel):
    message: str


router = APIRouter(prefix="/inquiries", tags=["inquiries"])


@router.post("", response_model=ThreadEntryDTO, status_code=status.HTTP_201_CREATED)
@inject
async def submit_inquiry(
    request: SubmitInquiryRequest,
    handler: FromDishka[SubmitInquiryHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    entry = await handler.execute(
        SubmitInquiryCommand(
            company_id=parse_user_id(request.company_id),
            inquirer_name=request.inquirer_name,
            message=request.message,
            inquirer_id=current_user.user_id,
        )
    )
    return ThreadEntryDTO.from_entry(entry)


@router.post(
    "/{inquiry_id}/responses",
    response_model=ThreadEntryDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def respond_to_inquiry(
    inquiry_id: str,
    request: InquiryMessageRequest,
    handler: FromDishka[RespondToInquiryHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    entry = await handler.execute(
        RespondToInquiryCommand(
            inquiry_id=inquiry_id,
            company_id=current_user.user_id,
            message=request.message,
        )
    )
    return ThreadEntryDTO.from_entry(entry)


@router.post(
    "/{inquiry_id}/followups",
    response_model=ThreadEntryDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def send_followup(
    inquiry_id: str,
    request: InquiryMessageRequest,
    handler: FromDishka[SendFollowupHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    entry = await handler.execute(
        SendFollowupCommand(
            inquiry_id=inquiry_id,
            sender_id=current_user.user_id,
            message=request.message,
        )
    )
    return ThreadEntryDTO.from_entry(entry)
