"""Request/response schemas for POST /users/updateProfile."""

from app.schemas.envelope import CamelModel


class ProfileObjectValue(CamelModel):
    first_string: str
    second_string: str


class UpdateProfileRequest(CamelModel):
    """Echo-style profile update body."""

    place_holder: str
    dummy_data: list[str]
    numeric_value: float
    object_value: ProfileObjectValue


class Tooltip(CamelModel):
    header: str
    footer: str


class UpdateProfileResponse(CamelModel):
    """Profile update result: each request field mapped onto a response field."""

    response: str
    data_list: list[str]
    amount: float
    tooltip: Tooltip
