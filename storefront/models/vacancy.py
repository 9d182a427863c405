"""
Job vacancy models: the feature toggle, applications and staff records
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .base import BaseEntity

ADMIN_CONFIG_COLLECTION = "adminConfig"
JOB_VACANCY_SETTINGS_ID = "jobVacancySettings"


class JobVacancySetting(BaseModel):
    job_vacancy_open: bool = True


class JobVacancyView(BaseModel):
    """What a customer session renders; tab and banner always follow the flag"""
    job_vacancy_open: bool
    show_tab: bool
    show_banner: bool

    @classmethod
    def from_setting(cls, setting: JobVacancySetting) -> "JobVacancyView":
        is_open = setting.job_vacancy_open
        return cls(job_vacancy_open=is_open, show_tab=is_open, show_banner=is_open)


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class JobApplication(BaseEntity):
    customer_id: str
    name: str
    ic_number: str
    email: str
    phone_number: str
    address: str
    job_status: ApplicationStatus = ApplicationStatus.PENDING
    receive_date: datetime
    remarks: Optional[str] = None
    decided_at: Optional[datetime] = None


class StaffStatus(str, Enum):
    ACTIVE = "active"
    TERMINATED = "terminated"


class StaffMember(BaseEntity):
    name: str
    email: str
    phone_number: str
    address: str
    remarks: Optional[str] = None
    status: StaffStatus = StaffStatus.ACTIVE
    appointed_date: datetime
    application_id: Optional[str] = None
    termination_reason: Optional[str] = None
