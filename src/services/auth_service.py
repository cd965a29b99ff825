"""Google OAuth2 (web flow) for the YouTube upload scope"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, List, Optional

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from src.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# 보관하는 PKCE verifier 최대 개수 (초과 시 가장 오래된 state 부터 제거)
MAX_PENDING_STATES = 100


class YouTubeAuthService:
    """
    Authorization code 를 credential 로 교환하고 메모리에 보관한다.
    토큰 저장/갱신 정책은 다루지 않는다 (refresh_token 이 있으면 google-auth 가 자동 갱신).
    """

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        redirect_uri: str,
        scopes: List[str],
        flow_factory: Callable[..., Any] = Flow.from_client_config,
        max_pending_states: int = MAX_PENDING_STATES,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scopes = scopes
        self._flow_factory = flow_factory
        self._credentials: Optional[Credentials] = None
        # state -> PKCE code_verifier
        self._pending_verifiers: "OrderedDict[str, Optional[str]]" = OrderedDict()
        self.max_pending_states = max_pending_states
        self._lock = threading.Lock()

    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def is_authenticated(self) -> bool:
        return self.get_credentials() is not None

    def get_credentials(self) -> Optional[Credentials]:
        with self._lock:
            return self._credentials

    @property
    def pending_state_count(self) -> int:
        with self._lock:
            return len(self._pending_verifiers)

    def set_credentials(self, credentials: Optional[Credentials]) -> None:
        with self._lock:
            self._credentials = credentials

    def authorization_url(self) -> str:
        """Google 동의 화면 URL 을 만든다."""
        flow = self._new_flow()
        url, state = flow.authorization_url(
            access_type="offline",
            include_granted_scopes="true",
            prompt="consent",
        )
        with self._lock:
            self._pending_verifiers[state] = getattr(flow, "code_verifier", None)
            self._pending_verifiers.move_to_end(state)
            while len(self._pending_verifiers) > self.max_pending_states:
                expired, _ = self._pending_verifiers.popitem(last=False)
                logger.debug(f"Dropped pending OAuth state {expired}")
        return url

    def exchange_code(self, code: Optional[str], state: Optional[str] = None) -> Credentials:
        """
        Authorization code 를 credential 로 교환한다.

        Args:
            code: OAuth callback 의 code 파라미터
            state: OAuth callback 의 state 파라미터 (PKCE verifier 조회용)

        Returns:
            Credentials: 발급된 credential

        Raises:
            AuthenticationError: code 누락 또는 교환 실패
        """
        if not code:
            raise AuthenticationError("Authentication failed: authorization code is missing")

        try:
            flow = self._new_flow()
            with self._lock:
                verifier = self._pending_verifiers.pop(state, None) if state else None
            if verifier:
                flow.code_verifier = verifier
            flow.fetch_token(code=code)
            credentials = flow.credentials
        except Exception as e:
            logger.error(f"OAuth code exchange failed: {e}")
            raise AuthenticationError(f"Authentication failed: {e}", original_error=e) from e

        self.set_credentials(credentials)
        logger.info("YouTube credentials established")
        return credentials

    def _new_flow(self):
        if not self.is_configured():
            raise AuthenticationError("Authentication failed: GOOGLE_CLIENT_ID/GOOGLE_CLIENT_SECRET are not set")

        client_config = {
            "web": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                "token_uri": "https://oauth2.googleapis.com/token",
                "redirect_uris": [self.redirect_uri],
            }
        }
        return self._flow_factory(client_config, scopes=self.scopes, redirect_uri=self.redirect_uri)
