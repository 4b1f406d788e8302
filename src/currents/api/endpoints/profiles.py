"""Profile endpoints: registration, lookup, drafts and account removal."""

from fastapi import APIRouter, Response, status

from currents.api.dependencies import CurrentUserIdDep, PostServiceDep, ProfileServiceDep
from currents.schemas.post import PostListEnvelope
from currents.schemas.profile import ProfileCreate, ProfileResponse
from currents.services.post_service import to_post_response

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("/me", response_model=ProfileResponse)
def ensure_profile(
    profile_data: ProfileCreate,
    user_id: CurrentUserIdDep,
    profiles: ProfileServiceDep,
    response: Response,
) -> ProfileResponse:
    """Return the caller's profile, creating it on first sign-in."""
    profile, created = profiles.ensure_profile(user_id, profile_data.model_dump())
    if created:
        response.status_code = status.HTTP_201_CREATED
    return ProfileResponse.model_validate(profile)


@router.get("/me/drafts", response_model=PostListEnvelope)
def list_my_drafts(user_id: CurrentUserIdDep, posts: PostServiceDep) -> PostListEnvelope:
    """List the caller's unpublished drafts."""
    return PostListEnvelope(posts=[to_post_response(p) for p in posts.drafts(user_id)])


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_my_profile(user_id: CurrentUserIdDep, profiles: ProfileServiceDep) -> Response:
    """Delete the caller's profile together with every post they wrote."""
    profiles.delete_profile(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{username}", response_model=ProfileResponse)
def get_profile(username: str, profiles: ProfileServiceDep) -> ProfileResponse:
    """Return a public profile by username."""
    return ProfileResponse.model_validate(profiles.get_by_username(username))
