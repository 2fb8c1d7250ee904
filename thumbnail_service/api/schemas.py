"""
Pydantic models for the Thumbnail Service.
This module contains the request, response, event and storage models.
"""

from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventType(str, Enum):
    """Event Grid event types handled by the service."""
    BLOB_CREATED = "Microsoft.Storage.BlobCreated"
    SUBSCRIPTION_VALIDATION = "Microsoft.EventGrid.SubscriptionValidationEvent"


class EventGridEvent(BaseModel):
    """Event Grid event envelope (only the fields the service relies on)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    event_type: str = Field(..., alias="eventType")
    subject: Optional[str] = None
    event_time: Optional[datetime] = Field(None, alias="eventTime")
    data: Dict[str, Any] = Field(default_factory=dict)
    data_version: Optional[str] = Field(None, alias="dataVersion")

    @field_validator("data", mode="before")
    @classmethod
    def default_data(cls, v):
        return {} if v is None else v

    @property
    def blob_url(self) -> Optional[str]:
        url = self.data.get("url")
        return url if isinstance(url, str) else None


class SubscriptionValidationResponse(BaseModel):
    """Response to the Event Grid subscription handshake."""
    validationResponse: str


class BlobData(BaseModel):
    """Fields derived from a blob URL path."""
    model_config = ConfigDict(frozen=True)

    relative_path: str
    container_name: str
    owner_id: str
    object_name: str
    is_public: bool


class FileProperties(BaseModel):
    """Properties of a stored file."""
    content_type: Optional[str] = None
    size: int = 0
    metadata: Dict[str, str] = Field(default_factory=dict)


class ThumbnailResult(BaseModel):
    """Outcome of one thumbnail pipeline run."""
    source_path: str
    thumbnail_path: str
    width: int
    height: int
    resized: bool
    tagged: bool


class ThumbnailRequest(BaseModel):
    """Manual thumbnail generation request."""
    url: str


class EventProcessingResponse(BaseModel):
    """Summary of a webhook delivery."""
    received: int
    processed: int
    ignored: int
    results: List[ThumbnailResult] = Field(default_factory=list)


class DirectoryProvisionResponse(BaseModel):
    """Result of provisioning a user directory."""
    container: str
    path: str
    created: bool
    acl: str


class ErrorResponse(BaseModel):
    """Error response model."""
    detail: str
