from pydantic import BaseModel


class ApplicationOut(BaseModel):
    id: str
    job_id: str
    applicant_id: str
    status: str
    created_at: str | None = None


class ApplicantOut(ApplicationOut):
    applicant_name: str
    applicant_username: str | None = None
    applicant_avatar_url: str | None = None


class MyApplicationOut(ApplicationOut):
    job_title: str | None = None  # None when the employer removed the job
    job_amount: float | None = None
    employer_name: str | None = None
    employer_phone: str | None = None  # only once hired


class HireResponse(BaseModel):
    application_id: str
    job_id: str
    applicant_id: str
    status: str = "ACCEPTED"
    applied_steps: list[str]
    rejected_count: int
    already_hired: bool
