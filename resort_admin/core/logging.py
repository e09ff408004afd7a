"""
logging.py

애플리케이션 로깅 설정.

- 표준 logging 모듈 사용, 모듈마다 logging.getLogger(__name__)로 로거 생성
- 출력은 stdout, 레벨은 settings.LOG_LEVEL 기준
- main.py에서 앱 생성 시 한 번만 호출

"""

import logging
import sys

from resort_admin.core.config import settings


def setup_logging() -> None:
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
