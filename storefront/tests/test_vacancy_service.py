"""
Job vacancy, application and staff tests
"""

import pytest
import requests

from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..services.notification_service import EmailNotifier
from ..services.vacancy_service import VacancyService
from .conftest import ADMIN_ID, CUSTOMER_ID

VALID_FORM = {
    "name": "Nur Aisyah",
    "ic_number": "990101141234",
    "email": "aisyah@example.com",
    "phone_number": "0123456789",
    "address": "12 Jalan Ampang, Kuala Lumpur",
}


class TestApplications:

    def test_apply(self, context):
        application = context.vacancies.apply(CUSTOMER_ID, VALID_FORM)

        assert application.job_status == "pending"
        assert application.receive_date is not None
        assert [a.id for a in context.vacancies.list_applications()] == [application.id]

    def test_form_problems_reported_together(self, context):
        form = {**VALID_FORM, "ic_number": "1234", "email": "not-an-email", "phone_number": "12345", "name": " "}
        with pytest.raises(ValidationError) as exc_info:
            context.vacancies.apply(CUSTOMER_ID, form)

        assert set(exc_info.value.details["fields"]) == {"name", "ic_number", "email", "phone_number"}

    def test_eleven_digit_phone_accepted(self, context):
        application = context.vacancies.apply(CUSTOMER_ID, {**VALID_FORM, "phone_number": "01123456789"})
        assert application.phone_number == "01123456789"

    def test_closed_vacancy_refuses_applications(self, context):
        context.features.set_job_vacancy_open(False, ADMIN_ID)
        with pytest.raises(InvalidTransitionError):
            context.vacancies.apply(CUSTOMER_ID, VALID_FORM)


class TestDecisions:

    def test_approve_appoints_staff_and_emails(self, context, notifier):
        application = context.vacancies.apply(CUSTOMER_ID, VALID_FORM)

        result = context.vacancies.decide(application.id, True, "Strong kitchen experience", ADMIN_ID)

        assert result["application"].job_status == "approved"
        assert result["application"].remarks == "Strong kitchen experience"
        assert result["staff"].status == "active"
        assert result["staff"].application_id == application.id
        assert result["email_sent"] is True
        assert notifier.sent == [("approval", "aisyah@example.com", "Nur Aisyah")]
        assert [s.name for s in context.vacancies.list_staff()] == ["Nur Aisyah"]

    def test_reject(self, context, notifier):
        application = context.vacancies.apply(CUSTOMER_ID, VALID_FORM)
        result = context.vacancies.decide(application.id, False, "No openings on weekends", ADMIN_ID)

        assert result["application"].job_status == "rejected"
        assert result["staff"] is None
        assert notifier.sent[0][0] == "rejection"
        assert context.vacancies.list_staff() == []

    def test_remarks_required(self, context):
        application = context.vacancies.apply(CUSTOMER_ID, VALID_FORM)
        with pytest.raises(ValidationError):
            context.vacancies.decide(application.id, True, "  ", ADMIN_ID)

    def test_decided_only_once(self, context):
        application = context.vacancies.apply(CUSTOMER_ID, VALID_FORM)
        context.vacancies.decide(application.id, False, "Not now", ADMIN_ID)
        with pytest.raises(InvalidTransitionError):
            context.vacancies.decide(application.id, True, "Changed our mind", ADMIN_ID)

    def test_email_failure_is_logged_not_raised(self, context, store):
        class DownSession:
            def post(self, url, json=None):
                raise requests.ConnectionError("mail backend down")

        vacancies = VacancyService(store, context.features,
                                   EmailNotifier("http://mail.test", store, session=DownSession()))
        application = vacancies.apply(CUSTOMER_ID, VALID_FORM)

        result = vacancies.decide(application.id, True, "Welcome aboard", ADMIN_ID)

        assert result["application"].job_status == "approved"
        assert result["email_sent"] is False
        assert store.get_logs(action="email_error")[0]["detail"]["endpoint"] == "send-approval-email"


class TestStaff:

    def test_terminate_with_reason(self, context):
        application = context.vacancies.apply(CUSTOMER_ID, VALID_FORM)
        staff = context.vacancies.decide(application.id, True, "Hired", ADMIN_ID)["staff"]

        terminated = context.vacancies.terminate_staff(staff.id, "Contract ended", ADMIN_ID)

        assert terminated.status == "terminated"
        assert terminated.termination_reason == "Contract ended"
        assert context.vacancies.list_staff("active") == []

    def test_terminate_needs_reason(self, context):
        with pytest.raises(ValidationError):
            context.vacancies.terminate_staff("any", "", ADMIN_ID)

    def test_terminate_unknown(self, context):
        with pytest.raises(NotFoundError):
            context.vacancies.terminate_staff("missing", "Gone", ADMIN_ID)


class TestEmailNotifier:

    def test_send_email_payload(self, store):
        class RecordingSession:
            def __init__(self):
                self.calls = []

            def post(self, url, json=None):
                self.calls.append((url, json))
                return type("Response", (), {"raise_for_status": lambda self: None})()

        session = RecordingSession()
        notifier = EmailNotifier("http://mail.test/", store, session=session)

        assert notifier.send_email("aisyah@example.com", "Welcome", "See you Monday", name="Aisyah") is True
        assert session.calls == [("http://mail.test/send-email",
                                  {"to": "aisyah@example.com", "subject": "Welcome",
                                   "text": "See you Monday", "name": "Aisyah"})]
