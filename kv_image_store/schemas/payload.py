"""Response payload produced by rendering a stored value."""

from pydantic import BaseModel, ConfigDict, Field


class Payload(BaseModel):
    """Content type and raw bytes ready to be written to the wire."""

    model_config = ConfigDict(frozen=True)

    content_type: str = Field(
        ...,
        description="Value of the Content-Type header sent with the body.",
        examples=["image/png", "text/plain"],
    )
    body: bytes = Field(
        ...,
        description="Raw response body.",
    )
