from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

MAX_URL_LENGTH = 2048

_http_url = TypeAdapter(HttpUrl)


# Request DTOs
class URLCreateRequest(BaseModel):
    # long_url is the Python field, 'url' is the JSON / form key
    long_url: str = Field(..., alias="url")

    @field_validator('long_url')
    def validate_url(cls, v):
        url_str = v.strip()

        # Length check
        if len(url_str) > MAX_URL_LENGTH:
            raise ValueError(f'URL must be at most {MAX_URL_LENGTH} characters')

        # Only allow http/https
        if not (url_str.startswith('http://') or url_str.startswith('https://')):
            raise ValueError('Only HTTP and HTTPS URLs are allowed')

        # Absolute URL with a host; the submitted text is stored unchanged
        try:
            _http_url.validate_python(url_str)
        except ValidationError:
            raise ValueError('Not a valid absolute URL')
        return url_str


def first_error_message(error: ValidationError) -> str:
    """Human readable message for the first validation error, for the form."""
    msg = error.errors()[0]["msg"]
    return msg.removeprefix("Value error, ")
