from datetime import date

from pydantic import BaseModel, Field, model_validator

_NOT_CLEARABLE = ("title", "amount", "has_food")


class JobFields(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    amount: float = Field(ge=0)
    location: str | None = Field(default=None, max_length=500)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    job_date: date | None = None
    shift_start: str | None = Field(default=None, max_length=20)
    shift_end: str | None = Field(default=None, max_length=20)
    has_food: bool = False
    dress_code: str | None = Field(default="Casual", max_length=100)

    @model_validator(mode="after")
    def coordinates_pair(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be given together")
        return self


class JobCreate(JobFields):
    pass


class JobUpdate(BaseModel):
    """Partial edit; omitted fields keep their value. Coordinates move as a pair."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    amount: float | None = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=500)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    job_date: date | None = None
    shift_start: str | None = Field(default=None, max_length=20)
    shift_end: str | None = Field(default=None, max_length=20)
    has_food: bool | None = None
    dress_code: str | None = Field(default=None, max_length=100)

    @model_validator(mode="after")
    def required_fields_not_cleared(self):
        for name in _NOT_CLEARABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be cleared")
        given = {"latitude", "longitude"} & self.model_fields_set
        if len(given) == 1:
            raise ValueError("latitude and longitude must be given together")
        if given and (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be set or cleared together")
        return self


class JobOut(BaseModel):
    id: str
    owner_id: str
    title: str
    amount: float
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    job_date: str | None = None
    shift_start: str | None = None
    shift_end: str | None = None
    has_food: bool = False
    dress_code: str | None = None
    status: str
    hired_applicant_id: str | None = None
    created_at: str | None = None


class FeedJobOut(JobOut):
    distance_km: float | None = None
    owner_name: str | None = None
    owner_avatar_url: str | None = None


class JobDetailOut(BaseModel):
    job: JobOut
    is_owner: bool
    owner_name: str | None = None
    my_application_id: str | None = None
    my_application_status: str | None = None
