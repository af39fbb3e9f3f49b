"""Domain error taxonomy shared by the engine services.

Every error carries a user-facing ``message`` and a machine ``code`` that
``src.core.errors.handle_engine_error`` maps to an HTTP status.
"""


class EngineError(Exception):
    """Base engine error."""

    def __init__(self, message: str, code: str = "engine_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(EngineError):
    """Referenced course, lesson or question does not exist."""

    def __init__(self, message: str = "Recurso nao encontrado", code: str = "not_found"):
        super().__init__(message, code)


class CourseNotFoundError(NotFoundError):
    """Course does not exist."""

    def __init__(self, message: str = "Curso nao encontrado"):
        super().__init__(message, "course_not_found")


class LessonNotFoundError(NotFoundError):
    """Lesson does not exist (or is not part of the given course)."""

    def __init__(self, message: str = "Aula nao encontrada"):
        super().__init__(message, "lesson_not_found")


class AccessDeniedError(EngineError):
    """A gated read or write was attempted without a granting access decision."""

    def __init__(self, message: str = "Voce nao tem acesso a esta aula"):
        super().__init__(message, "access_denied")


class ValidationError(EngineError):
    """Malformed input, e.g. an answer for a question outside the lesson."""

    def __init__(self, message: str = "Dados invalidos"):
        super().__init__(message, "validation_error")


class AlreadyEnrolledError(EngineError):
    """An ACTIVE enrollment already exists for (user_id, course_id)."""

    def __init__(self, message: str = "Usuario ja inscrito no curso"):
        super().__init__(message, "already_enrolled")


class StoreError(EngineError):
    """Underlying persistence failure. Never swallowed, never retried here."""

    def __init__(self, message: str = "Falha ao acessar o banco de dados"):
        super().__init__(message, "store_error")
