"""Google account linking schemas."""

from datetime import datetime
from typing import Optional, Union

from pydantic import EmailStr, Field

from app.schemas.auth import UserResponse
from app.schemas.common import CamelModel


class GoogleRegisterRequest(CamelModel):
    """Profile data the frontend received from Google.

    Presence of the required fields is checked by the service so a missing
    field answers with a single fixed message.
    """

    email: Optional[EmailStr] = None
    name: Optional[str] = None
    image: Optional[str] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    provider: Optional[str] = None
    provider_id: Optional[str] = None
    email_verified: Optional[Union[datetime, bool]] = None


class GoogleLoginRequest(CamelModel):
    id_token: str = Field(..., min_length=1)


class AccountResponse(CamelModel):
    provider: str
    provider_id: Optional[str] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class GoogleRegisterResponse(CamelModel):
    message: str
    user: UserResponse
    account: AccountResponse
