class AppException(Exception):
    """
    Базовый класс для всех исключений приложения.
    """
    pass


class NotFoundError(AppException):
    """
    Ресурс не найден (например, при поиске в БД).
    """
    pass


class ValidationError(AppException):
    """
    Ошибка валидации входных данных.
    В пайплайне приёма относится к одному наблюдению: оно пропускается,
    пакет продолжает обрабатываться.
    """

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class StorageError(AppException):
    """
    Ошибка хранилища (БД недоступна, нарушено ограничение уникальности).
    Прерывает обработку всего пакета.
    """
    pass
