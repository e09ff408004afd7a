"""
services/storage.py

객실 이미지 저장소(Object Storage) 서비스.

객실 레코드에는 이미지의 공개 URL
(예: http://host/storage/room-images/rooms/abc/1.jpg) 또는
버킷 내 경로(rooms/abc/1.jpg)가 저장되어 있다.
이 파일은 그 참조를 버킷 내 경로로 변환하고 실제 파일을 삭제한다.

주요 기능:
- 저장소 백엔드 인터페이스(StorageBackend)
- 로컬 파일시스템 버킷 구현(LocalStorageService)
- 공개 URL -> 버킷 내 경로 변환
- 객실 이미지 best-effort 삭제 (실패 시 로그만 남기고 계속 진행)

설계 원칙:
- 버킷 루트 밖의 경로(../ 등)는 거부
- 없는 파일 삭제는 오류가 아님 (이미 정리된 것으로 간주)
- 저장소 삭제 실패는 DB 일관성보다 우선순위가 낮음

관련 파일:
- resort_admin.core.config        : STORAGE_ROOT / ROOM_IMAGES_BUCKET / 공개 URL
- resort_admin.core.deps          : get_storage 의존성
- resort_admin.services.rooms     : 객실 삭제 워크플로

"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)


class StorageError(Exception):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to delete file: {path} ({reason})")
        self.path = path
        self.reason = reason


class StorageBackend(Protocol):
    bucket: str

    def remove(self, paths: list[str]) -> tuple[list[str], list[str]]:
        """Delete objects one by one; returns (removed, failed) paths."""
        ...


class LocalStorageService:
    """Bucket stored as a directory under storage_root."""

    def __init__(self, storage_root: str, bucket: str, public_base_url: str | None = None):
        self.bucket = bucket
        self.bucket_root = (Path(storage_root) / bucket).resolve()
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.bucket_root.mkdir(parents=True, exist_ok=True)

    def _full_path(self, path: str) -> Path:
        full_path = (self.bucket_root / path).resolve()
        try:
            full_path.relative_to(self.bucket_root)
        except ValueError as e:
            raise StorageError(path, "path escapes bucket") from e
        return full_path

    def public_url(self, path: str) -> str:
        base = self.public_base_url or ""
        return f"{base}/{self.bucket}/{path.lstrip('/')}"

    def exists(self, path: str) -> bool:
        return self._full_path(path).is_file()

    def _remove_one(self, path: str) -> bool:
        full_path = self._full_path(path)
        if not full_path.exists():
            return False
        try:
            full_path.unlink()
        except OSError as e:
            raise StorageError(path, str(e)) from e

        # 비어 있는 상위 디렉터리 정리 (실패해도 파일 삭제는 완료된 상태)
        parent = full_path.parent
        try:
            while parent != self.bucket_root and not any(parent.iterdir()):
                parent.rmdir()
                parent = parent.parent
        except OSError as e:
            logger.debug("Could not prune directory %s: %s", parent, e)
        return True

    def remove(self, paths: list[str]) -> tuple[list[str], list[str]]:
        removed, failed = [], []
        for path in paths:
            try:
                if self._remove_one(path):
                    removed.append(path)
            except StorageError as e:
                logger.warning("%s", e)
                failed.append(path)
        return removed, failed


"""
저장소 참조 -> 버킷 내 경로 변환

- http(s) URL 이면 경로에서 "/{bucket}/" 이후 부분을 사용 (URL 디코딩)
- 버킷 구간을 찾을 수 없는 URL 은 None (경고 로그)
- 그 외 문자열은 버킷 내 상대 경로로 간주

"""

def storage_path_from_ref(ref: str, bucket: str) -> str | None:
    if not ref or not isinstance(ref, str):
        return None

    parsed = urlparse(ref)
    if parsed.scheme in ("http", "https"):
        segment = f"/{bucket}/"
        start = parsed.path.find(segment)
        if start == -1:
            logger.warning("Could not find bucket segment in URL: %s", ref)
            return None
        path = unquote(parsed.path[start + len(segment):])
        return path or None

    return ref.lstrip("/") or None


@dataclass
class ImageCleanup:
    removed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def remove_room_images(storage: StorageBackend, refs: list[str]) -> ImageCleanup:
    result = ImageCleanup()
    paths = []
    for ref in refs:
        path = storage_path_from_ref(ref, storage.bucket)
        if path:
            paths.append(path)
        else:
            result.failed.append(ref)

    if not paths:
        return result

    try:
        removed, failed = storage.remove(paths)
    except Exception:
        # 백엔드 자체 장애 (연결 실패 등): 어느 파일이 지워졌는지 알 수 없음
        logger.exception("Storage delete failed, objects may be orphaned: %s", paths)
        result.failed.extend(paths)
        return result

    result.removed = removed
    result.failed.extend(failed)
    if failed:
        logger.warning("Storage delete failed for paths, objects may be orphaned: %s", failed)
    logger.info("Storage delete successful for paths: %s", removed)
    return result
