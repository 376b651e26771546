"""스토리지 서비스 — 로컬 디스크 파일 저장.

Storage Service — Local disk storage for uploaded files.
Files land in UPLOAD_DIR/<yyyy>/<mm>/<uuid4>.<ext> and are served from
UPLOAD_URL_PREFIX by the /uploads static mount.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from fastapi import UploadFile

from app.config import settings
from app.utils.exceptions import BadRequestError, PayloadTooLargeError

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    """저장된 파일 정보 (Where a file was written and how it is served)."""

    path: str  # UPLOAD_DIR 기준 상대 경로 — posix (Relative posix path)
    url: str
    suffix: str
    size: int


class StorageService:
    """파일 저장 서비스 — 확장자/크기 검증 후 로컬에 기록.

    Validates extension and size, then writes files under UPLOAD_DIR.
    Settings are read on every call so tests can point UPLOAD_DIR elsewhere.
    """

    @property
    def root(self) -> Path:
        return Path(settings.UPLOAD_DIR).resolve()

    def extension_of(self, filename: str) -> str:
        """소문자 확장자 — 없으면 빈 문자열 (Lowercase extension or '')."""
        return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

    def validate(self, filename: str, size: int) -> str:
        """업로드 가능 여부를 검사하고 확장자를 반환합니다.

        Raises:
            BadRequestError: 허용되지 않은 확장자 (Disallowed extension)
            PayloadTooLargeError: UPLOAD_MAX_SIZE 초과 (File too large)
        """
        ext: str = self.extension_of(filename)
        allowed: list[str] = [e.lower() for e in settings.UPLOAD_ALLOWED_EXTENSIONS]
        if ext not in allowed:
            raise BadRequestError(f"File type '.{ext}' is not allowed" if ext else "File has no extension")
        if size > settings.UPLOAD_MAX_SIZE:
            raise PayloadTooLargeError(
                f"File exceeds the maximum size of {settings.UPLOAD_MAX_SIZE} bytes"
            )
        return ext

    async def read_upload(self, file: UploadFile, limit: int | None = None) -> bytes:
        """업로드를 최대 limit + 1 바이트까지만 읽습니다.

        Read an upload without buffering past the size limit. At most
        `limit + 1` bytes are read; anything longer is rejected with 413.

        Raises:
            PayloadTooLargeError: limit 초과 (defaults to UPLOAD_MAX_SIZE)
        """
        max_size: int = settings.UPLOAD_MAX_SIZE if limit is None else limit
        content: bytes = await file.read(max_size + 1)
        if len(content) > max_size:
            raise PayloadTooLargeError(f"File exceeds the maximum size of {max_size} bytes")
        return content

    def resolve(self, relative_path: str) -> Path:
        """상대 경로를 UPLOAD_DIR 안의 절대 경로로 — 밖으로 나가면 400.

        Resolve a stored relative path; anything outside UPLOAD_DIR is refused.
        """
        root: Path = self.root
        target: Path = (root / relative_path).resolve()
        if not target.is_relative_to(root):
            raise BadRequestError("Invalid file path")
        return target

    def save(self, filename: str, content: bytes) -> StoredFile:
        """파일을 검증 후 저장합니다 (Validate and write a file).

        Args:
            filename: 원본 파일명 — 확장자 판단용 (Original name, for the extension)
            content: 파일 바이트 (File bytes)

        Returns:
            StoredFile: 저장 위치와 공개 URL (Stored location and public URL)
        """
        ext: str = self.validate(filename, len(content))
        now: datetime = datetime.now(timezone.utc)
        relative: str = f"{now:%Y}/{now:%m}/{uuid.uuid4().hex}.{ext}"

        target: Path = self.resolve(relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.info("Stored upload %s (%d bytes)", relative, len(content))

        prefix: str = settings.UPLOAD_URL_PREFIX.rstrip("/")
        return StoredFile(path=relative, url=f"{prefix}/{relative}", suffix=ext, size=len(content))

    def delete(self, relative_path: str) -> bool:
        """저장된 파일 삭제 — 이미 없으면 False (False when already gone)."""
        target: Path = self.resolve(relative_path)
        if not target.is_file():
            return False
        target.unlink()
        return True


# 싱글턴 인스턴스 — Singleton instance
storage_service: StorageService = StorageService()
