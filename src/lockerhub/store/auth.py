"""Auth container: the signed-in user and their session token."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from lockerhub.api.client import ApiClient
from lockerhub.domain.models import AuthResponse, LoginRequest, ProfileUpdate, RegisterRequest, User
from lockerhub.store.base import Action, AsyncOperation, Store, reduce_async, reduce_operations, run_operation

LOGIN = AsyncOperation("auth/loginUser", "Login failed")
REGISTER = AsyncOperation("auth/registerUser", "Registration failed")
LOAD_STORED_AUTH = AsyncOperation("auth/loadStoredAuth", "Failed to load stored auth data")
LOGOUT = AsyncOperation("auth/logoutUser", "Logout failed")
UPDATE_PROFILE = AsyncOperation("auth/updateProfile", "Profile update failed")

CLEAR_ERROR = "auth/clearError"
SET_USER = "auth/setUser"
SESSION_INVALIDATED = "auth/sessionInvalidated"


@dataclass(frozen=True)
class AuthState:
    user: User | None = None
    token: str | None = None
    is_loading: bool = False
    is_authenticated: bool = False
    error: str | None = None


def _signed_in(state: AuthState, response: AuthResponse) -> AuthState:
    return replace(state, user=response.user, token=response.token, is_authenticated=True)


def _signed_out(state: AuthState, _: Any = None) -> AuthState:
    return replace(state, user=None, token=None, is_authenticated=False)


def _set_user(state: AuthState, user: User) -> AuthState:
    return replace(state, user=user)


def auth_reducer(state: AuthState, action: Action) -> AuthState:
    # Failed sign-in attempts also drop the authenticated flag.
    for operation in (LOGIN, REGISTER, LOAD_STORED_AUTH):
        next_state = reduce_async(
            state,
            action,
            operation,
            _signed_in,
            on_rejected=lambda s: replace(s, is_authenticated=False),
        )
        if next_state is not None:
            return next_state

    next_state = reduce_operations(state, action, {LOGOUT: _signed_out, UPDATE_PROFILE: _set_user})
    if next_state is not None:
        return next_state

    if action.type == CLEAR_ERROR:
        return replace(state, error=None)
    if action.type == SET_USER:
        return _set_user(state, action.payload)
    if action.type == SESSION_INVALIDATED:
        return replace(_signed_out(state), is_loading=False)
    return state


class AuthContainer:
    """Runs auth operations against the API and keeps `AuthState` current."""

    def __init__(self, client: ApiClient):
        self._client = client
        self.store: Store[AuthState] = Store(auth_reducer, AuthState())

    @property
    def state(self) -> AuthState:
        return self.store.state

    def _persist(self, response: AuthResponse) -> AuthResponse:
        self._client.session.save(response.token, response.user.model_dump(mode="json", by_alias=True))
        return response

    async def login(self, credentials: LoginRequest) -> Action:
        async def call() -> AuthResponse:
            return self._persist(await self._client.login(credentials))

        return await run_operation(self.store, LOGIN, call)

    async def register(self, user_data: RegisterRequest) -> Action:
        async def call() -> AuthResponse:
            return self._persist(await self._client.register(user_data))

        return await run_operation(self.store, REGISTER, call)

    async def load_stored_auth(self) -> Action:
        """Restore the last session from the persisted store (no network call)."""

        async def call() -> AuthResponse:
            token = self._client.session.token
            user = self._client.session.user
            if not token or not user:
                raise ValueError("No stored auth data")
            return AuthResponse(user=User.model_validate(user), token=token)

        return await run_operation(self.store, LOAD_STORED_AUTH, call)

    async def logout(self) -> Action:
        async def call() -> None:
            self._client.session.clear(reason="logout")

        return await run_operation(self.store, LOGOUT, call)

    async def update_profile(self, update: ProfileUpdate) -> Action:
        async def call() -> User:
            if self.state.user is None:
                raise ValueError("User not authenticated")
            user = await self._client.update_user_profile(update)
            self._client.session.save_user(user.model_dump(mode="json", by_alias=True))
            return user

        return await run_operation(self.store, UPDATE_PROFILE, call)

    def clear_error(self) -> None:
        self.store.dispatch(Action(CLEAR_ERROR))

    def set_user(self, user: User) -> None:
        self.store.dispatch(Action(SET_USER, payload=user))
