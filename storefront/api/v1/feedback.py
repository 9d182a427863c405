"""
Feedback routes
"""

from fastapi import APIRouter, Depends

from ...core.context import AppContext, get_context
from ...core.error_handler import create_success_response
from ...core.security import CurrentUser, get_current_user
from ...schemas.feedback import FeedbackCreateRequest

router = APIRouter()


@router.post("")
def submit_feedback(req: FeedbackCreateRequest, user: CurrentUser = Depends(get_current_user),
                    ctx: AppContext = Depends(get_context)):
    feedback = ctx.feedback.submit(user.uid, req.order_id, req.item_id, req.rating, req.comment)
    return create_success_response(feedback.model_dump(mode="json"), "Thank you for your feedback")
