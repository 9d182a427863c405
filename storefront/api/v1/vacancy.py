"""
Job vacancy routes
The live toggle for every session and customer applications
"""

from fastapi import APIRouter, Depends

from ...core.context import AppContext, get_context
from ...core.error_handler import create_success_response
from ...core.security import CurrentUser, get_current_user
from ...schemas.vacancy import JobApplicationRequest

router = APIRouter()


@router.get("/settings/job-vacancy")
def get_job_vacancy(ctx: AppContext = Depends(get_context)):
    return create_success_response(ctx.features.get_job_vacancy_setting().model_dump())


@router.post("/jobs/applications")
def apply_for_job(req: JobApplicationRequest, user: CurrentUser = Depends(get_current_user),
                  ctx: AppContext = Depends(get_context)):
    application = ctx.vacancies.apply(user.uid, req.model_dump())
    return create_success_response(application.model_dump(mode="json"),
                                   "Your application has been submitted")
