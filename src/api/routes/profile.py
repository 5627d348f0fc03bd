"""Profile API routes."""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_profile_service
from api.schemas.common import SuccessResponse
from api.schemas.profile import (
    EducationCreate,
    EducationResponse,
    ExperienceCreate,
    ExperienceResponse,
    ProfileOwner,
    ProfileResponse,
    ProfileUpsert,
    SocialLinksResponse,
)
from domain.entities.profile import Profile
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])

_NOT_FOUND = {404: {"description": "Profile not found"}}


def _to_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        user=(
            ProfileOwner(
                id=profile.owner.id,
                name=profile.owner.name,
                avatar=profile.owner.avatar,
            )
            if profile.owner
            else profile.user_id
        ),
        handle=profile.handle,
        status=profile.status,
        company=profile.company,
        website=profile.website,
        location=profile.location,
        bio=profile.bio,
        githubusername=profile.githubusername,
        skills=profile.skills,
        social=SocialLinksResponse(**asdict(profile.social)),
        experience=[
            ExperienceResponse(
                id=entry.id,
                title=entry.title,
                company=entry.company,
                location=entry.location,
                from_=entry.from_date,
                to=entry.to_date,
                current=entry.current,
                description=entry.description,
            )
            for entry in profile.experience
        ],
        education=[
            EducationResponse(
                id=entry.id,
                school=entry.school,
                degree=entry.degree,
                fieldofstudy=entry.fieldofstudy,
                from_=entry.from_date,
                to=entry.to_date,
                current=entry.current,
                description=entry.description,
            )
            for entry in profile.education
        ],
        date=profile.created_at,
    )


@router.get(
    "",
    response_model=ProfileResponse,
    summary="Get the current user's profile",
    responses=_NOT_FOUND,
)
async def get_current_profile(
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Get the authenticated user's profile with name and avatar."""
    return _to_response(await service.get_for_user(user.id))


@router.get(
    "/all",
    response_model=list[ProfileResponse],
    summary="List all profiles",
    responses=_NOT_FOUND,
)
async def list_profiles(
    service: ProfileService = Depends(get_profile_service),
) -> list[ProfileResponse]:
    """Get every profile."""
    return [_to_response(profile) for profile in await service.get_all()]


@router.get(
    "/handle/{handle}",
    response_model=ProfileResponse,
    summary="Get a profile by handle",
    responses=_NOT_FOUND,
)
async def get_profile_by_handle(
    handle: str,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Public lookup by handle."""
    return _to_response(await service.get_by_handle(handle))


@router.get(
    "/user/{user_id}",
    response_model=ProfileResponse,
    summary="Get a profile by user id",
    responses=_NOT_FOUND,
)
async def get_profile_by_user(
    user_id: str,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Public lookup by owning user id."""
    return _to_response(await service.get_for_user(user_id))


@router.post(
    "",
    response_model=ProfileResponse,
    summary="Create or update the current user's profile",
    responses={400: {"description": "Invalid form or handle already taken"}},
)
async def upsert_profile(
    body: ProfileUpsert,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Create the profile, or update only the fields sent."""
    return _to_response(await service.upsert(user.id, body.model_dump()))


@router.post(
    "/experience",
    response_model=ProfileResponse,
    summary="Add an experience entry",
    responses=_NOT_FOUND,
)
async def add_experience(
    body: ExperienceCreate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Prepend an experience entry and return the updated profile."""
    profile = await service.add_experience(user.id, body.model_dump(by_alias=True))
    return _to_response(profile)


@router.post(
    "/education",
    response_model=ProfileResponse,
    summary="Add an education entry",
    responses=_NOT_FOUND,
)
async def add_education(
    body: EducationCreate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Prepend an education entry and return the updated profile."""
    profile = await service.add_education(user.id, body.model_dump(by_alias=True))
    return _to_response(profile)


@router.delete(
    "/experience/{exp_id}",
    response_model=ProfileResponse,
    summary="Delete an experience entry",
    responses=_NOT_FOUND,
)
async def delete_experience(
    exp_id: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Remove an experience entry. Unknown ids leave the profile unchanged."""
    return _to_response(await service.remove_experience(user.id, exp_id))


@router.delete(
    "/education/{edu_id}",
    response_model=ProfileResponse,
    summary="Delete an education entry",
    responses=_NOT_FOUND,
)
async def delete_education(
    edu_id: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Remove an education entry. Unknown ids leave the profile unchanged."""
    return _to_response(await service.remove_education(user.id, edu_id))


@router.delete(
    "",
    response_model=SuccessResponse,
    summary="Delete the current user's account",
)
async def delete_account(
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    """Delete the profile, the user's posts and the user."""
    await service.delete_account(user.id)
    return SuccessResponse()
