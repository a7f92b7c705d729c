"""Payload models sent to the worker."""

from pydantic import BaseModel, ConfigDict, Field


class EmailInvite(BaseModel):
    """Calendar invite attached to an email."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    summary: str | None = None
    location: str | None = None
    url: str | None = None


class ApiKeyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")


class EmailMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(alias="to")
    from_: str | None = Field(default=None, alias="from")
    subject: str = ""
    contents: str = ""
    cc: str | None = None
    bcc: str | None = None
    automation: bool = False
    invite: EmailInvite | None = None

    def worker_payload(self) -> dict:
        """Body for the worker's email endpoint."""
        payload = {
            "email": self.email,
            "from": self.from_,
            "contents": self.contents,
            "subject": self.subject,
            "cc": self.cc,
            "bcc": self.bcc,
            "purpose": "custom",
            "automation": self.automation,
        }
        if self.invite is not None:
            payload["invite"] = self.invite.model_dump(by_alias=True, exclude_none=True)
        return {key: value for key, value in payload.items() if value is not None}
