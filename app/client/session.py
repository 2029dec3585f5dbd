"""Client-side authentication state."""

import logging

from app.client.credentials import TOKEN_KEY, CredentialStore
from app.client.models import User
from app.client.transport import ApiError, ApiTransport, ErrorKind

logger = logging.getLogger(__name__)


class AuthSession:
    """Owns the current user and is the only writer of the stored token.

    Create one per application run, call ``check_session()`` at start-up and
    pass the instance to whatever needs to know who is signed in.
    """

    def __init__(self, transport: ApiTransport, store: CredentialStore) -> None:
        self.transport = transport
        self.store = store
        self.user: User | None = None
        self.is_loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _accept(self, body: dict) -> User:
        token = body.get("token")
        if not token:
            raise ApiError("Missing token in authentication response")
        self.store.set(TOKEN_KEY, token)
        self.user = User.model_validate(body["user"])
        return self.user

    async def check_session(self) -> User | None:
        """Restore the signed-in user from a stored token.

        An authentication failure clears the stored token. Other failures
        leave it in place so a later start-up can retry.
        """
        try:
            if not self.store.get(TOKEN_KEY):
                self.user = None
                return None
            body = await self.transport.get("/user")
            self.user = User.model_validate(body)
            return self.user
        except ApiError as e:
            if e.kind == ErrorKind.AUTHENTICATION:
                logger.info("Stored token rejected, clearing it")
                self.store.delete(TOKEN_KEY)
            else:
                logger.warning(f"Could not restore session: {e.message}")
            self.user = None
            return None
        finally:
            self.is_loading = False

    async def login(self, email: str, password: str) -> User:
        """Sign in and persist the issued token."""
        body = await self.transport.post(
            "/login", json={"email": email, "password": password}
        )
        return self._accept(body)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        password_confirmation: str,
    ) -> User:
        """Create an account and persist the issued token."""
        body = await self.transport.post(
            "/register",
            json={
                "name": name,
                "email": email,
                "password": password,
                "password_confirmation": password_confirmation,
            },
        )
        return self._accept(body)

    async def logout(self) -> None:
        """Revoke the token server side; local state is cleared regardless."""
        try:
            if self.store.get(TOKEN_KEY):
                await self.transport.post("/logout")
        except ApiError as e:
            logger.warning(f"Server logout failed: {e.message}")
        finally:
            self.store.delete(TOKEN_KEY)
            self.user = None
