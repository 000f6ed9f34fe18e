"""
Kite Connect login flow request/response models.
"""

from pydantic import BaseModel, Field


class LoginUrlResponse(BaseModel):
    login_url: str = Field(..., description="Open in a browser to start the login flow")


class SessionRequest(BaseModel):
    """Request model for the token exchange."""

    request_token: str = Field(..., min_length=1, description="Token from the login redirect")

    class Config:
        """Pydantic config."""

        json_schema_extra = {"example": {"request_token": "Gq3x0aBcD1eFgHiJ"}}


class SessionResponse(BaseModel):
    """New access token; store it as KITE_ACCESS_TOKEN."""

    access_token: str
    user_id: str | None = None
    user_name: str | None = None
