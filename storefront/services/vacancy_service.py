"""
Job vacancy service
Customer applications, admin decisions and the staff roster

Application flow:
- Customers apply while the job vacancy toggle is open
- Admin approves or rejects once, with remarks; approval appoints an active staff member
- The applicant is emailed on a best-effort basis
"""

import re
from typing import Any, Dict, List, Optional

from ..core.database import DocumentStore, utcnow
from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..models.vacancy import (
    ApplicationStatus,
    JobApplication,
    StaffMember,
    StaffStatus,
)
from .feature_service import FeatureService
from .notification_service import EmailNotifier

APPLICATIONS = "jobvacancy"
STAFF = "staff"

IC_NUMBER_PATTERN = re.compile(r"^\d{12}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\d{10,11}$")

APPLICATION_FIELDS = ("name", "ic_number", "email", "phone_number", "address")


def validate_application_form(form: Dict[str, Any]) -> Dict[str, str]:
    """Trimmed form values; raises ValidationError listing every bad field"""
    values = {field: str(form.get(field) or "").strip() for field in APPLICATION_FIELDS}
    problems: Dict[str, str] = {}

    for field, value in values.items():
        if not value:
            problems[field] = "required"
    if values["ic_number"] and not IC_NUMBER_PATTERN.match(values["ic_number"]):
        problems["ic_number"] = "must be exactly 12 digits"
    if values["email"] and not EMAIL_PATTERN.match(values["email"]):
        problems["email"] = "invalid email address"
    if values["phone_number"] and not PHONE_PATTERN.match(values["phone_number"]):
        problems["phone_number"] = "must be 10 or 11 digits"

    if problems:
        raise ValidationError("Please correct the application form", details={"fields": problems})
    return values


class VacancyService:

    def __init__(self, store: DocumentStore, features: FeatureService,
                 notifier: Optional[EmailNotifier] = None):
        self.db = store
        self.features = features
        self.notifier = notifier

    def apply(self, customer_id: str, form: Dict[str, Any]) -> JobApplication:
        if not self.features.is_job_vacancy_open():
            raise InvalidTransitionError("Job vacancies are currently closed")
        values = validate_application_form(form)

        application = JobApplication(customer_id=customer_id, receive_date=utcnow(), **values)
        application.id = self.db.add(APPLICATIONS, application.to_document())
        self.db.log("job_application_submit", user_id=customer_id, actor_id=customer_id,
                    detail={"application_id": application.id})
        return application

    def list_applications(self, status: Optional[ApplicationStatus] = None) -> List[JobApplication]:
        where = {"job_status": ApplicationStatus(status).value} if status else None
        docs = self.db.query(APPLICATIONS, where, order_by="receive_date", descending=True)
        return [JobApplication.from_document(d) for d in docs]

    def get_application(self, application_id: str) -> JobApplication:
        application = JobApplication.from_document(self.db.get(APPLICATIONS, application_id))
        if application is None:
            raise NotFoundError("Application not found", details={"application_id": application_id})
        return application

    def decide(self, application_id: str, approve: bool, remarks: str, actor_id: str) -> Dict[str, Any]:
        """
        Approve or reject a pending application

        Returns:
            dict: application, staff (approval only) and whether the email went out
        """
        remarks = (remarks or "").strip()
        if not remarks:
            raise ValidationError("Please provide remarks before proceeding.")

        staff = None
        with self.db.transaction():
            application = self.get_application(application_id)
            if ApplicationStatus(application.job_status) != ApplicationStatus.PENDING:
                raise InvalidTransitionError(
                    f"Application already {application.job_status}",
                    details={"application_id": application_id, "status": application.job_status},
                )

            now = utcnow()
            if approve:
                staff = StaffMember(
                    name=application.name,
                    email=application.email,
                    phone_number=application.phone_number,
                    address=application.address,
                    remarks=remarks,
                    appointed_date=now,
                    application_id=application_id,
                )
                staff.id = self.db.add(STAFF, staff.to_document())

            status = ApplicationStatus.APPROVED if approve else ApplicationStatus.REJECTED
            doc = self.db.update(APPLICATIONS, application_id, {
                "job_status": status.value,
                "remarks": remarks,
                "decided_at": now.isoformat(),
            })
            self.db.log("job_application_decision", user_id=application.customer_id, actor_id=actor_id,
                        detail={"application_id": application_id, "status": status.value,
                                "staff_id": staff.id if staff else None})

        email_sent = False
        if self.notifier is not None:
            if approve:
                email_sent = self.notifier.send_approval_email(application.email, application.name)
            else:
                email_sent = self.notifier.send_rejection_email(application.email, application.name)

        return {
            "application": JobApplication.from_document(doc),
            "staff": staff,
            "email_sent": email_sent,
        }

    def list_staff(self, status: Optional[StaffStatus] = None) -> List[StaffMember]:
        where = {"status": StaffStatus(status).value} if status else None
        docs = self.db.query(STAFF, where, order_by="name")
        return [StaffMember.from_document(d) for d in docs]

    def get_staff(self, staff_id: str) -> StaffMember:
        staff = StaffMember.from_document(self.db.get(STAFF, staff_id))
        if staff is None:
            raise NotFoundError("Staff member not found", details={"staff_id": staff_id})
        return staff

    def terminate_staff(self, staff_id: str, reason: str, actor_id: str) -> StaffMember:
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Please provide a reason for termination.")

        with self.db.transaction():
            staff = self.get_staff(staff_id)
            if StaffStatus(staff.status) == StaffStatus.TERMINATED:
                raise InvalidTransitionError("Staff member already terminated",
                                             details={"staff_id": staff_id})
            doc = self.db.update(STAFF, staff_id, {
                "status": StaffStatus.TERMINATED.value,
                "termination_reason": reason,
            })
            self.db.log("staff_terminate", actor_id=actor_id,
                        detail={"staff_id": staff_id, "reason": reason})
        return StaffMember.from_document(doc)
