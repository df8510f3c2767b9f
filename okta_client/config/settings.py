"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

AUTH_MODES = ("ssws", "bearer", "client_credentials")
DEFAULT_SCOPES = ("okta.users.read", "okta.groups.read")
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "okta-client-python/0.1.0"


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """Read an Okta credential, preferring a mounted secret file.

    Used for ``okta_api_token``, ``okta_access_token`` and
    ``okta_client_secret``. A non-empty ``/run/secrets/<secret_name>`` wins
    over ``env_var`` (e.g. ``OKTA_API_TOKEN``). The value itself is never logged.

    Returns:
        The stripped credential, or None when neither source has one
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info(f"Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            logger.warning(f"Failed to read /run/secrets/{secret_name}: {e}")

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug(f"Loaded {env_var} from environment")
            return secret_value

    return None


@dataclass
class OktaConfig:
    """Okta client configuration container."""
    org_url: str
    auth_mode: str = "ssws"

    # Credentials
    api_token: str = ""
    access_token: str = ""
    client_id: str = ""
    client_secret: str = ""
    private_key: str = ""

    # OAuth
    scopes: str = " ".join(DEFAULT_SCOPES)
    token_url: str = ""

    # Transport
    request_timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def token_url_resolved(self) -> str:
        """Token endpoint, defaulting to the org authorization server."""
        if self.token_url:
            return self.token_url
        return f"{self.org_url.rstrip('/')}/oauth2/v1/token"

    @property
    def scope_list(self) -> list[str]:
        return [scope for scope in re.split(r"[\s,]+", self.scopes) if scope]


def _read_private_key(path: Optional[str]) -> str:
    if not path:
        return ""
    key_file = Path(path)
    if not key_file.is_file():
        raise RuntimeError(f"OKTA_PRIVATE_KEY_FILE '{path}' does not exist")
    return key_file.read_text()


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"OKTA_REQUEST_TIMEOUT must be a number, got '{raw}'") from None
    if timeout <= 0:
        raise ValueError(f"OKTA_REQUEST_TIMEOUT must be positive, got {timeout}")
    return timeout


def load_settings() -> OktaConfig:
    """Load Okta client settings from environment and /run/secrets."""
    org_url = os.environ.get("OKTA_ORG_URL", "").strip().rstrip("/")
    if not org_url:
        raise RuntimeError("Environment variable OKTA_ORG_URL is required.")

    auth_mode = os.environ.get("OKTA_AUTH_MODE", "ssws").strip().lower()
    if auth_mode not in AUTH_MODES:
        raise RuntimeError(f"OKTA_AUTH_MODE must be one of {', '.join(AUTH_MODES)}, got '{auth_mode}'")

    api_token = _load_secret_from_file("okta_api_token", "OKTA_API_TOKEN") or ""
    access_token = _load_secret_from_file("okta_access_token", "OKTA_ACCESS_TOKEN") or ""
    client_secret = _load_secret_from_file("okta_client_secret", "OKTA_CLIENT_SECRET") or ""
    client_id = os.environ.get("OKTA_CLIENT_ID", "").strip()
    private_key = _read_private_key(os.environ.get("OKTA_PRIVATE_KEY_FILE"))

    if auth_mode == "ssws" and not api_token:
        raise RuntimeError("OKTA_API_TOKEN is required when OKTA_AUTH_MODE=ssws.")
    if auth_mode == "bearer" and not access_token:
        raise RuntimeError("OKTA_ACCESS_TOKEN is required when OKTA_AUTH_MODE=bearer.")
    if auth_mode == "client_credentials":
        if not client_id:
            raise RuntimeError("OKTA_CLIENT_ID is required when OKTA_AUTH_MODE=client_credentials.")
        if not (client_secret or private_key):
            raise RuntimeError(
                "OKTA_CLIENT_SECRET or OKTA_PRIVATE_KEY_FILE is required when OKTA_AUTH_MODE=client_credentials."
            )

    config = OktaConfig(
        org_url=org_url,
        auth_mode=auth_mode,
        api_token=api_token,
        access_token=access_token,
        client_id=client_id,
        client_secret=client_secret,
        private_key=private_key,
        scopes=os.environ.get("OKTA_SCOPES", " ".join(DEFAULT_SCOPES)),
        token_url=os.environ.get("OKTA_TOKEN_URL", ""),
        request_timeout=_parse_timeout(os.environ.get("OKTA_REQUEST_TIMEOUT")),
        user_agent=os.environ.get("OKTA_USER_AGENT", DEFAULT_USER_AGENT),
    )

    logger.info(f"Okta settings loaded: org={org_url}; auth_mode={auth_mode}")
    return config
