"""
services/admin_log.py

관리자 행위 로그 기록 서비스.

관리자/직원이 수행한 주요 행위를
AdminActionLog 테이블에 기록하는 역할을 담당한다.

설계 원칙:
- 실제 변경과 같은 세션에 add 만 하고 커밋은 호출 측에서 수행
  (변경이 롤백되면 로그도 함께 롤백됨)
- 로그 데이터는 수정/삭제하지 않는 것을 전제로 설계

"""

from sqlalchemy.orm import Session

from resort_admin.models.admin_log import AdminActionLog, AdminAction


def write_admin_log(
    db: Session,
    *,
    actor_id,
    action: AdminAction,
    target_type: str,
    target_id,
    before_value=None,
    after_value=None,
):
    log = AdminActionLog(
        actor_id=actor_id,
        action=action,
        target_type=target_type,
        target_id=str(target_id),
        before_value=before_value,
        after_value=after_value,
    )
    db.add(log)
    return log
