#app/services/attachment_storage.py
"""
Хранилище вложений задач на локальном диске.

Файлы пишутся под сгенерированным именем (uuid4 + расширение исходного файла),
исходное имя клиента хранится только в метаданных. Хранилище не трогает записи
в БД: оно возвращает метаданные и изменения списка, а сохраняет их app.crud.task.

Порядок: файл на диске появляется раньше, чем метаданные в задаче.
При удалении метаданные убираются всегда, даже если файл удалить не удалось.
"""
import logging
import os
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from app.core.exceptions import (
    AttachmentNotFound,
    AttachmentValidationError,
    FileMissingOnDisk,
    FileTooLarge,
    PartialCleanupFailure,
    StorageWriteFailed,
    UnsupportedFileType,
)
from app.schemas.attachment import (
    AttachmentDelta,
    AttachmentMetadata,
    CleanupResult,
    RetrievedAttachment,
    UploadedFile,
)

logger = logging.getLogger("OpsDash.Attachments")

MIB = 1024 * 1024
_EXTENSION_RE = re.compile(r"^[a-z0-9]{1,10}$")

AttachmentLike = Union[AttachmentMetadata, dict]


def format_size_limit(max_size: int) -> str:
    """10485760 -> '10MB'."""
    if max_size % MIB == 0:
        return f"{max_size // MIB}MB"
    if max_size % 1024 == 0:
        return f"{max_size // 1024}KB"
    return f"{max_size} bytes"


def storage_extension(original_name: str) -> str:
    """
    Расширение исходного файла для имени в хранилище ('.pdf') или '' если оно подозрительное.
    """
    base = original_name.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in base:
        return ""
    ext = base.rsplit(".", 1)[-1].lower()
    return f".{ext}" if _EXTENSION_RE.match(ext) else ""


def generate_storage_name(original_name: str) -> str:
    return f"{uuid.uuid4().hex}{storage_extension(original_name)}"


def normalize_attachments(attachments: Iterable[AttachmentLike]) -> List[AttachmentMetadata]:
    """Привести JSON-список из задачи к моделям AttachmentMetadata."""
    return [
        item if isinstance(item, AttachmentMetadata) else AttachmentMetadata.model_validate(item)
        for item in (attachments or [])
    ]


class AttachmentStorage:
    """
    Файловое хранилище вложений.

    Создаётся один раз при старте (см. app.dependencies.get_attachment_storage)
    и передаётся в обработчики через Depends.
    """

    def __init__(self, upload_dir: Union[str, Path], max_file_size: int, allowed_mime_types: Sequence[str]):
        self.upload_dir = Path(upload_dir).resolve()
        self.max_file_size = max_file_size
        self.allowed_mime_types = tuple(allowed_mime_types)

    @classmethod
    def from_settings(cls, settings) -> "AttachmentStorage":
        return cls(
            upload_dir=settings.UPLOAD_DIR,
            max_file_size=settings.MAX_FILE_SIZE,
            allowed_mime_types=settings.ALLOWED_MIME_TYPES,
        )

    # === Валидация ===

    def validate(self, upload: UploadedFile) -> None:
        """
        Проверить имя, размер и MIME-тип файла. Ничего не пишет на диск.
        """
        if not upload.original_name or not upload.original_name.strip():
            raise AttachmentValidationError("File name is required.")

        size = max(upload.size, len(upload.content))
        if size > self.max_file_size:
            limit = format_size_limit(self.max_file_size)
            raise FileTooLarge(
                f"File '{upload.original_name}' exceeds the maximum allowed size of {limit}.",
                max_size=self.max_file_size,
            )

        if upload.mime_type not in self.allowed_mime_types:
            raise UnsupportedFileType(
                f"File type '{upload.mime_type or 'unknown'}' is not allowed. "
                f"Allowed types: {', '.join(self.allowed_mime_types)}",
                allowed_types=self.allowed_mime_types,
            )

    # === Запись ===

    def store(self, upload: UploadedFile) -> AttachmentMetadata:
        """
        Провалидировать и записать файл. Возвращает метаданные, к задаче не привязывает.
        """
        self.validate(upload)
        storage_name = generate_storage_name(upload.original_name)
        destination = self.upload_dir / storage_name
        self._write(destination, upload.content)
        logger.info(
            f"Stored attachment '{upload.original_name}' as {storage_name} ({len(upload.content)} bytes)"
        )
        return AttachmentMetadata(
            filename=storage_name,
            original_name=upload.original_name.strip(),
            mime_type=upload.mime_type,
            size=len(upload.content),
            upload_date=datetime.now(timezone.utc),
            path=str(destination),
        )

    def store_batch(self, uploads: Iterable[UploadedFile]) -> List[AttachmentMetadata]:
        """
        Записать несколько файлов по принципу всё-или-ничего.

        Сначала валидируются все файлы. Если запись одного из них падает,
        уже записанные файлы этой пачки удаляются и ошибка пробрасывается.
        """
        uploads = list(uploads)
        for upload in uploads:
            self.validate(upload)

        stored: List[AttachmentMetadata] = []
        try:
            for upload in uploads:
                stored.append(self.store(upload))
        except StorageWriteFailed:
            if stored:
                logger.warning(f"Batch upload failed, discarding {len(stored)} already stored file(s)")
                self.delete_files(stored)
            raise
        return stored

    def _write(self, destination: Path, content: bytes) -> None:
        tmp_path = destination.with_name(f".{destination.name}.part")
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "wb") as fh:
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, destination)
        except OSError as e:
            logger.error(f"Failed to write attachment {destination.name}: {e}")
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError as cleanup_error:
                logger.warning(f"Could not remove temp file {tmp_path}: {cleanup_error}")
            raise StorageWriteFailed(f"Failed to store file '{destination.name}'.") from e

    # === Чтение ===

    def find(self, attachments: Iterable[AttachmentLike], filename: str) -> AttachmentMetadata:
        for item in normalize_attachments(attachments):
            if item.filename == filename:
                return item
        raise AttachmentNotFound(f"Attachment '{filename}' not found.")

    def retrieve(self, attachments: Iterable[AttachmentLike], filename: str) -> RetrievedAttachment:
        """
        Прочитать файл вложения. Различает отсутствие записи (AttachmentNotFound)
        и отсутствие файла при живой записи (FileMissingOnDisk).
        """
        meta = self.find(attachments, filename)
        path = Path(meta.path)
        try:
            content = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            logger.error(f"Attachment {filename} is registered but missing at {path}")
            raise FileMissingOnDisk(f"File '{filename}' is missing from storage.")
        return RetrievedAttachment(
            filename=meta.filename,
            original_name=meta.original_name,
            mime_type=meta.mime_type,
            content=content,
        )

    # === Удаление ===

    def delete_file(self, attachment: AttachmentLike) -> CleanupResult:
        """
        Удалить файл вложения с диска. Ошибки не пробрасываются: они логируются
        и возвращаются в CleanupResult, решение остаётся за вызывающим.
        """
        meta = normalize_attachments([attachment])[0]
        try:
            Path(meta.path).unlink()
        except FileNotFoundError:
            logger.warning(f"Attachment file {meta.filename} was already absent at {meta.path}")
            return CleanupResult(filename=meta.filename)
        except OSError as e:
            failure = PartialCleanupFailure(f"Failed to delete attachment file '{meta.filename}': {e}")
            logger.warning(str(failure))
            return CleanupResult(filename=meta.filename, ok=False, error=str(failure))
        logger.info(f"Deleted attachment file {meta.filename}")
        return CleanupResult(filename=meta.filename)

    def delete_files(self, attachments: Iterable[AttachmentLike]) -> List[CleanupResult]:
        return [self.delete_file(item) for item in normalize_attachments(attachments)]

    def remove(
        self, attachments: Iterable[AttachmentLike], filename: str
    ) -> Tuple[List[AttachmentMetadata], CleanupResult]:
        """
        Удалить одно вложение. Возвращает список без него и результат очистки диска.
        """
        current = normalize_attachments(attachments)
        meta = self.find(current, filename)
        result = self.delete_file(meta)
        remaining = [item for item in current if item.filename != filename]
        return remaining, result

    def remove_all(self, attachments: Iterable[AttachmentLike]) -> List[CleanupResult]:
        """Удалить файлы всех вложений задачи (best-effort)."""
        results = self.delete_files(attachments)
        failed = [r.filename for r in results if not r.ok]
        if failed:
            logger.warning(f"{len(failed)} attachment file(s) could not be deleted: {failed}")
        return results

    def replace_batch(
        self,
        attachments: Iterable[AttachmentLike],
        new_files: Iterable[UploadedFile],
        remove_filenames: Iterable[str],
        apply_removals: bool = True,
    ) -> AttachmentDelta:
        """
        Добавить новые файлы и убрать указанные. Имена на удаление и новые файлы
        проверяются до записи; новые файлы пишутся раньше, чем удаляются старые.

        С apply_removals=False файлы на удаление остаются на диске, а вызывающий
        удаляет их сам после сохранения задачи (delete_files).
        """
        current = normalize_attachments(attachments)
        remove_names = list(dict.fromkeys(name for name in remove_filenames if name))
        to_remove = [self.find(current, name) for name in remove_names]

        added = self.store_batch(new_files)

        cleanup = self.delete_files(to_remove) if apply_removals else []
        remaining = [item for item in current if item.filename not in remove_names]
        return AttachmentDelta(
            added=added,
            removed=remove_names,
            cleanup=cleanup,
            attachments=remaining + added,
        )
