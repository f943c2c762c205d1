"""
Meetup API client for the Groups service.

Docs for the upstream API: http://www.meetup.com/meetup_api/docs/
"""

from __future__ import annotations

from typing import Any, List, Optional

import httpx
from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError, ValidationInfo, field_validator

from shared.logging import get_logger

from service_groups.app.domain.models import GroupRecord
from service_groups.app.exceptions import DecodeError, TransportError, UpstreamAPIError


class UpstreamErrorItem(BaseModel):
    message: str = ""


class MeetupGroupPayload(BaseModel):
    """Subset of the upstream group document this service consumes."""

    name: StrictStr = ""
    link: StrictStr = ""
    city: StrictStr = ""
    country: StrictStr = ""
    members: StrictInt = Field(default=0, ge=0)
    errors: List[UpstreamErrorItem] = Field(default_factory=list)

    @field_validator("name", "link", "city", "country", "members", "errors", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # JSON null leaves the field at its zero value
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value

    def to_record(self) -> GroupRecord:
        return GroupRecord(
            name=self.name,
            url=self.link,
            members=self.members,
            city=self.city,
            country=self.country,
        )


class MeetupClient:
    """Fetches single groups from the Meetup API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.logger = get_logger("groups.meetup_client")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def fetch(self, identifier: str) -> GroupRecord:
        """
        Fetch and decode the group named by ``identifier``.

        Raises TransportError when the request fails, DecodeError when the body
        is not a group document, and UpstreamAPIError when the API reports
        errors in the body.
        """
        url = f"{self.base_url}/{identifier}"
        params = {"sign": "true", "key": self.api_key}

        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            self.logger.warning("Meetup request failed", identifier=identifier, error=str(exc))
            raise TransportError(exc, details={"identifier": identifier}) from exc

        try:
            payload = MeetupGroupPayload.model_validate_json(response.content)
        except ValidationError as exc:
            self.logger.warning(
                "Meetup response could not be decoded",
                identifier=identifier,
                status_code=response.status_code,
            )
            raise DecodeError(
                _summarize_validation_error(exc),
                details={"identifier": identifier, "status_code": response.status_code},
            ) from exc

        if payload.errors:
            messages = [item.message for item in payload.errors]
            self.logger.info("Meetup reported errors", identifier=identifier, errors=messages)
            raise UpstreamAPIError(messages, details={"identifier": identifier})

        self.logger.debug("Meetup group retrieved", identifier=identifier)
        return payload.to_record()


def _summarize_validation_error(exc: ValidationError) -> str:
    """Render the first validation problem as ``<location>: <message>``."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"{location}: {first.get('msg', 'invalid value')}"
