"""
Job vacancy and staff request schemas
Form fields are checked by the vacancy service so every problem is reported together.
"""

from pydantic import BaseModel, Field


class JobApplicationRequest(BaseModel):
    name: str = ""
    ic_number: str = Field("", description="12-digit identity card number")
    email: str = ""
    phone_number: str = Field("", description="10 or 11 digits")
    address: str = ""


class ApplicationDecisionRequest(BaseModel):
    approve: bool
    remarks: str = Field("", description="Required for both approval and rejection")


class StaffTerminateRequest(BaseModel):
    reason: str = ""


class JobVacancyToggleRequest(BaseModel):
    job_vacancy_open: bool
