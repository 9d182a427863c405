"""
Admin routes
Order cancellation, the job vacancy toggle, reports, logs, feedback moderation,
applications and staff
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.context import AppContext, get_context
from ...core.error_handler import create_success_response
from ...core.security import CurrentUser, require_admin
from ...models.vacancy import ApplicationStatus, StaffStatus
from ...schemas.feedback import FeedbackVisibilityRequest
from ...schemas.vacancy import (
    ApplicationDecisionRequest,
    JobVacancyToggleRequest,
    StaffTerminateRequest,
)

router = APIRouter()


@router.post("/orders/{order_id}/cancel")
def cancel_order(order_id: str, user: CurrentUser = Depends(require_admin),
                 ctx: AppContext = Depends(get_context)):
    order = ctx.orders.cancel(order_id, user.uid)
    return create_success_response(order.model_dump(mode="json"), "Order cancelled")


@router.get("/orders/reconciliation")
def list_reconciliation_orders(user: CurrentUser = Depends(require_admin),
                               ctx: AppContext = Depends(get_context)):
    """Orders whose payment record could not be written"""
    orders = ctx.orders.list_reconciliation_orders()
    return create_success_response([o.model_dump(mode="json") for o in orders])


@router.put("/settings/job-vacancy")
def set_job_vacancy(req: JobVacancyToggleRequest, user: CurrentUser = Depends(require_admin),
                    ctx: AppContext = Depends(get_context)):
    view = ctx.features.set_job_vacancy_open(req.job_vacancy_open, user.uid)
    return create_success_response(view.model_dump(), "Job vacancy setting updated")


@router.get("/reports/monthly")
def monthly_report(year: Optional[int] = Query(None), month: Optional[int] = Query(None),
                   user: CurrentUser = Depends(require_admin), ctx: AppContext = Depends(get_context)):
    rows = ctx.reports.monthly_sales(year=year, month=month)
    return create_success_response([{**row, "total_sales": str(row["total_sales"])} for row in rows])


@router.get("/logs")
def get_logs(action: Optional[str] = Query(None), limit: int = Query(100, ge=1, le=1000),
             user: CurrentUser = Depends(require_admin), ctx: AppContext = Depends(get_context)):
    logs = ctx.store.get_logs(action=action, limit=limit)
    return create_success_response([{**log, "created_at": str(log["created_at"])} for log in logs])


@router.get("/feedback")
def list_feedback(user: CurrentUser = Depends(require_admin), ctx: AppContext = Depends(get_context)):
    return create_success_response([f.model_dump(mode="json") for f in ctx.feedback.list_all()])


@router.put("/feedback/{feedback_id}/visibility")
def set_feedback_visibility(feedback_id: str, req: FeedbackVisibilityRequest,
                            user: CurrentUser = Depends(require_admin),
                            ctx: AppContext = Depends(get_context)):
    feedback = ctx.feedback.set_visibility(feedback_id, req.visible, user.uid)
    return create_success_response(feedback.model_dump(mode="json"), "Feedback visibility updated")


@router.get("/applications")
def list_applications(status: Optional[ApplicationStatus] = Query(None),
                      user: CurrentUser = Depends(require_admin), ctx: AppContext = Depends(get_context)):
    applications = ctx.vacancies.list_applications(status)
    return create_success_response([a.model_dump(mode="json") for a in applications])


@router.get("/applications/{application_id}")
def get_application(application_id: str, user: CurrentUser = Depends(require_admin),
                    ctx: AppContext = Depends(get_context)):
    return create_success_response(ctx.vacancies.get_application(application_id).model_dump(mode="json"))


@router.post("/applications/{application_id}/decision")
def decide_application(application_id: str, req: ApplicationDecisionRequest,
                       user: CurrentUser = Depends(require_admin), ctx: AppContext = Depends(get_context)):
    result = ctx.vacancies.decide(application_id, req.approve, req.remarks, user.uid)
    staff = result["staff"]
    data = {
        "application": result["application"].model_dump(mode="json"),
        "staff": staff.model_dump(mode="json") if staff else None,
        "email_sent": result["email_sent"],
    }
    return create_success_response(data, f"Application {data['application']['job_status']}")


@router.get("/staff")
def list_staff(status: Optional[StaffStatus] = Query(None), user: CurrentUser = Depends(require_admin),
               ctx: AppContext = Depends(get_context)):
    return create_success_response([s.model_dump(mode="json") for s in ctx.vacancies.list_staff(status)])


@router.post("/staff/{staff_id}/terminate")
def terminate_staff(staff_id: str, req: StaffTerminateRequest, user: CurrentUser = Depends(require_admin),
                    ctx: AppContext = Depends(get_context)):
    staff = ctx.vacancies.terminate_staff(staff_id, req.reason, user.uid)
    return create_success_response(staff.model_dump(mode="json"), "Staff member terminated")
