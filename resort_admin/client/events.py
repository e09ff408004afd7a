"""
client/events.py

인증 이벤트 허브 (클라이언트 측, 메모리 내 발행/구독).

대시보드의 인증 클라이언트(AuthClient)가 로그인 / 로그아웃 / 토큰 재발급 /
사용자 정보 변경을 발행하고, 세션 저장소(SessionStore)가 구독한다.

- 전역 싱글턴 없음: 허브는 생성해서 주입한다
- subscribe() 는 해제 핸들(Subscription)을 반환
- 구독자 예외는 로그만 남기고 나머지 구독자는 계속 호출

"""

import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


AuthListener = Callable[[AuthEvent], None]


class Subscription:
    def __init__(self, hub: "AuthEventHub", listener: AuthListener):
        self._hub = hub
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._hub._remove(self._listener)
            self.active = False


class AuthEventHub:
    def __init__(self):
        self._listeners: list[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove(self, listener: AuthListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Auth event listener failed for %s", event.value)
