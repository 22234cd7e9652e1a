"""Profile update: maps each request field straight onto its response field."""

from app.schemas.profile import Tooltip, UpdateProfileRequest, UpdateProfileResponse


def apply_profile_update(body: UpdateProfileRequest) -> UpdateProfileResponse:
    return UpdateProfileResponse(
        response=body.place_holder,
        data_list=list(body.dummy_data),
        amount=body.numeric_value,
        tooltip=Tooltip(
            header=body.object_value.first_string,
            footer=body.object_value.second_string,
        ),
    )
