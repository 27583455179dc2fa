from datetime import date

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ContributionDay(BaseModel):
    """Single day item used in the contributions response."""

    date: date
    count: int
    level: int


class ContributionsResponse(BaseModel):
    """Contribution calendar of a user for an inclusive date range."""

    model_config = ConfigDict(populate_by_name=True)

    total_contributions: int
    contributions: list[ContributionDay]
    username: str
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    timestamp: str


class ErrorResponse(BaseModel):
    """Error envelope returned when contributions cannot be loaded."""

    error: str
    timestamp: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
