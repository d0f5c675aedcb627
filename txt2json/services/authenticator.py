"""
HTTP Basic authentication against credentials held in the secret store.

Expected values are fetched on every call. Username and password are both
compared in constant time, and both comparisons always run, so neither the
position of a mismatch nor which field was wrong shows up in the result.
"""

import base64
import hmac
import logging

from txt2json.config import SecretStoreConfig
from txt2json.errors import AuthError, SecretStoreError
from txt2json.schemas import AuthenticationOutcome
from txt2json.secret_store import SecretStore

logger = logging.getLogger(__name__)

_SCHEME = "basic "


def secure_equals(actual: str, expected: str) -> bool:
    """Constant-time string comparison over UTF-8 bytes."""
    return hmac.compare_digest(actual.encode("utf-8"), expected.encode("utf-8"))


class Authenticator:
    def __init__(self, store: SecretStore, config: SecretStoreConfig) -> None:
        self._store = store
        self._username_secret = config.username_secret
        self._password_secret = config.password_secret

    async def authenticate(self, header_value: str) -> AuthenticationOutcome:
        """
        Validate an Authorization header value.

        Returns a successful outcome carrying the username, or a failed one
        carrying the AuthError kind and a client-safe message.
        """
        if not header_value:
            return self._fail(AuthError.MISSING_HEADER, "Missing Authorization header")

        if header_value[: len(_SCHEME)].lower() != _SCHEME:
            return self._fail(
                AuthError.MALFORMED_SCHEME,
                "Invalid Authorization header format. Expected 'Basic <base64>'",
            )

        encoded = header_value[len(_SCHEME):].strip()
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        except ValueError:
            return self._fail(AuthError.MALFORMED_ENCODING, "Invalid Base64 encoding in Authorization header")

        parts = decoded.split(":", 1)
        if len(parts) != 2:
            return self._fail(
                AuthError.MALFORMED_CREDENTIALS,
                "Invalid credential format. Expected 'username:password'",
            )
        username, password = parts

        try:
            expected_username = await self._store.get_secret(self._username_secret)
            expected_password = await self._store.get_secret(self._password_secret)
        except SecretStoreError as exc:
            logger.error("Could not fetch API credentials from secret store: %s", exc)
            expected_username = expected_password = None

        if not expected_username or not expected_password:
            return self._fail(AuthError.CREDENTIAL_STORE_UNAVAILABLE, "Authentication validation failed")

        username_ok = secure_equals(username, expected_username)
        password_ok = secure_equals(password, expected_password)
        if not (username_ok and password_ok):
            logger.warning("Authentication failed for user: %s", username)
            return AuthenticationOutcome.failed(AuthError.INVALID_CREDENTIALS, "Invalid credentials")

        logger.info("Authentication successful for user: %s", username)
        return AuthenticationOutcome.success(username)

    @staticmethod
    def _fail(kind: AuthError, message: str) -> AuthenticationOutcome:
        logger.warning("Authentication rejected (%s): %s", kind.value, message)
        return AuthenticationOutcome.failed(kind, message)
