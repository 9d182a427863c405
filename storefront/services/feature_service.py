"""
Feature toggle service
The job vacancy flag in adminConfig/jobVacancySettings, pushed live to every session
"""

from typing import AsyncIterator

from ..core.database import DocumentStore
from ..models.vacancy import (
    ADMIN_CONFIG_COLLECTION,
    JOB_VACANCY_SETTINGS_ID,
    JobVacancySetting,
    JobVacancyView,
)


class FeatureService:

    def __init__(self, store: DocumentStore):
        self.db = store

    @staticmethod
    def _to_setting(doc) -> JobVacancySetting:
        # an absent document means the vacancy is open
        return JobVacancySetting.model_validate(doc) if doc else JobVacancySetting()

    def get_job_vacancy_setting(self) -> JobVacancyView:
        doc = self.db.get(ADMIN_CONFIG_COLLECTION, JOB_VACANCY_SETTINGS_ID)
        return JobVacancyView.from_setting(self._to_setting(doc))

    def is_job_vacancy_open(self) -> bool:
        return self.get_job_vacancy_setting().job_vacancy_open

    def set_job_vacancy_open(self, value: bool, actor_id: str) -> JobVacancyView:
        setting = JobVacancySetting(job_vacancy_open=bool(value))
        self.db.set(ADMIN_CONFIG_COLLECTION, JOB_VACANCY_SETTINGS_ID, setting.model_dump())
        self.db.log("job_vacancy_toggle", actor_id=actor_id,
                    detail={"job_vacancy_open": setting.job_vacancy_open})
        return JobVacancyView.from_setting(setting)

    async def watch_job_vacancy(self) -> AsyncIterator[JobVacancyView]:
        """Current view first, then one view per write"""
        async for doc in self.db.watch_document(ADMIN_CONFIG_COLLECTION, JOB_VACANCY_SETTINGS_ID):
            yield JobVacancyView.from_setting(self._to_setting(doc))
