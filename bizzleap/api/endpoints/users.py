"""
User profile endpoints.

Profile read/update, password change, active sessions and account
deactivation for the authenticated user.
"""

from fastapi import APIRouter, Depends, Response, status

from bizzleap.api.dependencies import get_auth_context, get_current_user, get_user_service
from bizzleap.models.user import User
from bizzleap.schemas.auth import MessageResponse, SessionResponse
from bizzleap.schemas.user import PasswordChange, ProfileUpdateResponse, UserProfileUpdate, UserResponse
from bizzleap.services.auth_gateway import AuthContext
from bizzleap.services.user_service import UserService

router = APIRouter()


@router.get("/profile", summary="Current user profile.", response_model=UserResponse)
def get_profile(user: User = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    return service.get_profile(user.id)


@router.put("/profile", summary="Update the current user's profile.", response_model=ProfileUpdateResponse)
def update_profile(data: UserProfileUpdate, user: User = Depends(get_current_user),
                   service: UserService = Depends(get_user_service)):
    """Only the allow-listed fields present in the body are changed."""
    updated = service.update_profile(user.id, data)
    return ProfileUpdateResponse(message="Profile updated successfully", user=UserResponse.model_validate(updated))


@router.delete("/profile", summary="Deactivate the current user's account.", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_account(user: User = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    service.deactivate(user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/password", summary="Change password and sign out everywhere.", response_model=MessageResponse)
def change_password(data: PasswordChange, user: User = Depends(get_current_user),
                    service: UserService = Depends(get_user_service)):
    revoked = service.change_password(user.id, data.current_password, data.new_password)
    return MessageResponse(message=f"Password changed; {revoked} session(s) signed out")


@router.get("/sessions", summary="Active sessions of the current user.", response_model=list[SessionResponse])
def list_sessions(context: AuthContext = Depends(get_auth_context), service: UserService = Depends(get_user_service)):
    sessions = service.sessions.list_active(context.user.id)
    return [
        SessionResponse.model_validate(entry).model_copy(update={"current": entry.token == context.token})
        for entry in sessions
    ]
