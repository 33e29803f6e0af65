from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# Response DTOs
class URLInfoResponse(BaseModel):
    # long_url is the Python field, 'url' is the JSON key
    long_url: str = Field(..., alias="url")
    short_code: str
    short_url: str
    click_count: int
    created_by: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_row(cls, row, base_url: str) -> "URLInfoResponse":
        return cls(
            long_url=row.longurl,
            short_code=row.shorturl,
            short_url=f"{base_url.rstrip('/')}/{row.shorturl}",
            click_count=row.clicks,
            created_by=row.created_by,
        )
