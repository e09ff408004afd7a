"""
client/session.py

관리자 대시보드용 인증 클라이언트(AuthClient)와 세션 저장소(SessionStore).

AuthClient
- 백엔드의 /auth/* API를 httpx.Client 로 호출
- 로그인 / 로그아웃 / 재발급 성공 시 AuthEventHub 에 이벤트 발행
- refresh_token 쿠키는 httpx.Client 의 쿠키 저장소가 관리

SessionStore
- 상태: loading -> authenticated(principal) | anonymous
- mount()   : loading 으로 전환, 이벤트 구독, 서버에서 세션 다시 계산
- SIGNED_OUT 이벤트       -> anonymous (캐시된 프로필 제거)
- 그 외 인증 이벤트        -> 서버에서 세션 다시 계산 (reload)
- unmount() : 구독 해제, 이후 상태 전이 없음
- watch()   : 상태가 바뀔 때마다 콜백 호출

"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import httpx

from resort_admin.client.events import AuthEvent, AuthEventHub, Subscription

logger = logging.getLogger(__name__)


class AuthClientError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _error_from(response: httpx.Response) -> AuthClientError:
    try:
        detail = response.json().get("detail", response.text)
    except ValueError:
        detail = response.text
    return AuthClientError(response.status_code, str(detail))


class AuthClient:
    def __init__(self, http: httpx.Client, events: AuthEventHub):
        self.http = http
        self.events = events
        self.access_token: str | None = None

    def _headers(self) -> dict:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def sign_in(self, email: str, password: str) -> str:
        response = self.http.post("/auth/login", json={"email": email, "password": password})
        if response.status_code != 200:
            raise _error_from(response)
        self.access_token = response.json()["data"]["access_token"]
        self.events.publish(AuthEvent.SIGNED_IN)
        return self.access_token

    def refresh(self) -> str:
        response = self.http.post("/auth/refresh")
        if response.status_code != 200:
            raise _error_from(response)
        self.access_token = response.json()["data"]["access_token"]
        self.events.publish(AuthEvent.TOKEN_REFRESHED)
        return self.access_token

    # 서버 호출이 실패해도 로컬 토큰은 지우고 SIGNED_OUT 발행
    def sign_out(self) -> None:
        try:
            response = self.http.post("/auth/logout", headers=self._headers())
            if response.status_code not in (204, 401):
                logger.warning("Sign-out request failed: %s", _error_from(response))
        finally:
            self.access_token = None
            self.http.cookies.clear()
            self.events.publish(AuthEvent.SIGNED_OUT)

    def notify_user_updated(self) -> None:
        self.events.publish(AuthEvent.USER_UPDATED)

    def get_session(self) -> dict | None:
        response = self.http.get("/auth/session", headers=self._headers())
        if response.status_code == 401:
            return None
        if response.status_code != 200:
            raise _error_from(response)
        return response.json()["data"]


class SessionStatus(str, Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class SessionPrincipal:
    id: str
    email: str
    role: str
    staff_name: str | None = None
    staff_username: str | None = None
    position: str | None = None


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus
    principal: SessionPrincipal | None = None

    @property
    def role(self) -> str | None:
        return self.principal.role if self.principal else None


LOADING = SessionState(SessionStatus.LOADING)
ANONYMOUS = SessionState(SessionStatus.ANONYMOUS)


def principal_from_session(data: dict) -> SessionPrincipal:
    staff = data.get("staff") if data.get("role") != "customer" else None
    return SessionPrincipal(
        id=data["id"],
        email=data["email"],
        role=data["role"],
        staff_name=staff.get("name") if staff else None,
        staff_username=staff.get("username") if staff else None,
        position=staff.get("position") if staff else None,
    )


class SessionStore:
    def __init__(self, auth: AuthClient):
        self.auth = auth
        self.state = LOADING
        self._subscription: Subscription | None = None
        self._watchers: list[Callable[[SessionState], None]] = []

    @property
    def mounted(self) -> bool:
        return self._subscription is not None

    def watch(self, callback: Callable[[SessionState], None]) -> Callable[[], None]:
        self._watchers.append(callback)

        def _unwatch() -> None:
            if callback in self._watchers:
                self._watchers.remove(callback)
        return _unwatch

    def _set(self, state: SessionState) -> None:
        if state == self.state:
            return
        self.state = state
        for callback in list(self._watchers):
            callback(state)

    def mount(self) -> None:
        if self.mounted:
            return
        self._set(LOADING)
        self._subscription = self.auth.events.subscribe(self._on_auth_event)
        self.reload()

    def unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def reload(self) -> None:
        if not self.mounted:
            return
        try:
            data = self.auth.get_session()
        except (httpx.HTTPError, AuthClientError) as e:
            logger.warning("Could not load session, treating as signed out: %s", e)
            data = None

        if not data:
            self._set(ANONYMOUS)
            return
        self._set(SessionState(SessionStatus.AUTHENTICATED, principal_from_session(data)))

    def _on_auth_event(self, event: AuthEvent) -> None:
        if event == AuthEvent.SIGNED_OUT:
            self._set(ANONYMOUS)
        else:
            self.reload()
