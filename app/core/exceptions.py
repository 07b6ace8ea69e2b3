# app/core/exceptions.py


class BaseAppException(Exception):
    """Базовый класс для всех кастомных исключений приложения."""
    def __init__(self, message: str = "App exception"):
        super().__init__(message)

# ==== Валидация/создание ====

class ValidationError(BaseAppException):
    """Общая ошибка валидации."""
    def __init__(self, message: str = "Validation error"):
        super().__init__(message)

class StaffValidationError(ValidationError):
    """Ошибка валидации сотрудника."""
    def __init__(self, message: str = "Staff member validation error"):
        super().__init__(message)

class TaskValidationError(ValidationError):
    """Ошибка валидации задачи."""
    def __init__(self, message: str = "Task validation error"):
        super().__init__(message)

class ProjectValidationError(ValidationError):
    """Ошибка валидации проекта."""
    def __init__(self, message: str = "Project validation error"):
        super().__init__(message)

class DevelopmentProjectValidationError(ValidationError):
    """Ошибка валидации проекта разработки."""
    def __init__(self, message: str = "Development project validation error"):
        super().__init__(message)

class ContractValidationError(ValidationError):
    """Ошибка валидации контракта."""
    def __init__(self, message: str = "Contract validation error"):
        super().__init__(message)

class BudgetEntryValidationError(ValidationError):
    """Ошибка валидации записи бюджета."""
    def __init__(self, message: str = "Budget entry validation error"):
        super().__init__(message)

class CloudBackupValidationError(ValidationError):
    """Ошибка валидации записи о бэкапе."""
    def __init__(self, message: str = "Cloud backup validation error"):
        super().__init__(message)

# ==== NotFound ====

class NotFoundError(BaseAppException):
    """Ошибка отсутствия ресурса."""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)

class StaffMemberNotFound(NotFoundError):
    """Ошибка: сотрудник не найден."""
    def __init__(self, message: str = "Staff member not found"):
        super().__init__(message)

class TaskNotFound(NotFoundError):
    """Ошибка: задача не найдена."""
    def __init__(self, message: str = "Task not found"):
        super().__init__(message)

class ProjectNotFound(NotFoundError):
    """Ошибка: проект не найден."""
    def __init__(self, message: str = "Project not found"):
        super().__init__(message)

class DevelopmentProjectNotFound(NotFoundError):
    """Ошибка: проект разработки не найден."""
    def __init__(self, message: str = "Development project not found"):
        super().__init__(message)

class ContractNotFound(NotFoundError):
    """Ошибка: контракт не найден."""
    def __init__(self, message: str = "Contract not found"):
        super().__init__(message)

class BudgetEntryNotFound(NotFoundError):
    """Ошибка: запись бюджета не найдена."""
    def __init__(self, message: str = "Budget entry not found"):
        super().__init__(message)

class CloudBackupNotFound(NotFoundError):
    """Ошибка: запись о бэкапе не найдена."""
    def __init__(self, message: str = "Cloud backup not found"):
        super().__init__(message)

# ==== Конфликты ====

class DuplicateStaffEmail(BaseAppException):
    """Ошибка: сотрудник с таким email уже существует."""
    def __init__(self, message: str = "Staff member with this email already exists"):
        super().__init__(message)

class StaffMemberInUse(BaseAppException):
    """Ошибка: сотрудник назначен на задачи или проекты."""
    def __init__(self, message: str = "Staff member is still referenced"):
        super().__init__(message)

class TaskConcurrencyConflict(BaseAppException):
    """Ошибка: задача была изменена параллельным запросом."""
    def __init__(self, message: str = "Task was modified by another request"):
        super().__init__(message)

# ==== Вложения ====

class AttachmentError(BaseAppException):
    """Базовая ошибка подсистемы вложений."""
    def __init__(self, message: str = "Attachment error"):
        super().__init__(message)

class AttachmentValidationError(ValidationError):
    """Файл не прошёл валидацию (размер, тип, имя). Проверяется до записи на диск."""
    def __init__(self, message: str = "Attachment validation failed"):
        super().__init__(message)

class FileTooLarge(AttachmentValidationError):
    """Ошибка: файл превышает допустимый размер."""
    def __init__(self, message: str = "File is too large", max_size: int = 0):
        super().__init__(message)
        self.max_size = max_size

class UnsupportedFileType(AttachmentValidationError):
    """Ошибка: тип файла не входит в allow-list."""
    def __init__(self, message: str = "Unsupported file type", allowed_types: tuple = ()):
        super().__init__(message)
        self.allowed_types = tuple(allowed_types)

class StorageWriteFailed(AttachmentError):
    """Ошибка записи файла на диск (права, место и т.д.)."""
    def __init__(self, message: str = "Failed to store file"):
        super().__init__(message)

class AttachmentNotFound(NotFoundError):
    """Ошибка: вложение с таким именем отсутствует в списке задачи."""
    def __init__(self, message: str = "Attachment not found"):
        super().__init__(message)

class FileMissingOnDisk(AttachmentError):
    """Метаданные есть, а файла на диске нет (рассинхронизация)."""
    def __init__(self, message: str = "Attachment file is missing on disk"):
        super().__init__(message)

class PartialCleanupFailure(AttachmentError):
    """Не удалось удалить файл при очистке. Только логируется, клиенту не отдаётся."""
    def __init__(self, message: str = "Failed to delete attachment file"):
        super().__init__(message)
