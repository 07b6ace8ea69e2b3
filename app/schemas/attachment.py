#app/schemas/attachment.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

class UploadedFile(BaseModel):
    """
    UploadedFile — сырой файл из multipart-запроса, ещё не прошедший валидацию.
    """
    content: bytes = Field(..., description="Содержимое файла")
    size: int = Field(..., ge=0, description="Размер в байтах")
    mime_type: str = Field("", description="Content-Type, заявленный клиентом")
    original_name: str = Field("", description="Имя файла у клиента")

class AttachmentRead(BaseModel):
    """
    AttachmentRead — вложение задачи в ответе API. Путь на диске наружу не отдаётся.
    """
    filename: str = Field(..., examples=["3f9c0e8a1b2d4c5e9f7a6b5c4d3e2f1a.pdf"], description="Имя файла в хранилище")
    original_name: str = Field(..., examples=["invoice.pdf"], description="Исходное имя файла")
    mime_type: str = Field(..., examples=["application/pdf"], description="MIME-тип")
    size: int = Field(..., examples=[102400], description="Размер файла в байтах")
    upload_date: datetime = Field(..., description="Дата/время загрузки")

    model_config = ConfigDict(from_attributes=True)

class AttachmentMetadata(AttachmentRead):
    """
    AttachmentMetadata — полная запись вложения, как она хранится в задаче.
    """
    path: str = Field(..., description="Путь к файлу в хранилище")

class RetrievedAttachment(BaseModel):
    """
    RetrievedAttachment — содержимое файла и поля для заголовков ответа.
    """
    filename: str
    original_name: str
    mime_type: str
    content: bytes

class CleanupResult(BaseModel):
    """
    CleanupResult — итог удаления файла с диска. Ошибка не пробрасывается, а возвращается.
    """
    filename: str
    ok: bool = True
    error: Optional[str] = None

class AttachmentDelta(BaseModel):
    """
    AttachmentDelta — изменения списка вложений для одного обновления задачи.
    """
    added: List[AttachmentMetadata] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    cleanup: List[CleanupResult] = Field(default_factory=list)
    attachments: List[AttachmentMetadata] = Field(default_factory=list, description="Итоговый список вложений")
