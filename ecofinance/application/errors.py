"""
Use case errors, translated to HTTP status codes by the API layer
"""

EMAIL_TAKEN_MESSAGE = "Пользователь с таким email уже существует"


class ValidationError(ValueError):
    """Некорректные входные данные (400)"""
    pass


class EmailAlreadyRegisteredError(ValidationError):
    """Email уже занят другим пользователем"""
    pass


class InvalidCurrentPasswordError(ValidationError):
    """Текущий пароль не совпал при смене пароля"""
    pass


class InvalidResetTokenError(ValidationError):
    """Токен сброса пароля не найден, истёк или уже использован"""
    pass


class InvalidCredentialsError(Exception):
    """Неверная пара email/пароль (401)"""
    pass


class EntityNotFoundError(LookupError):
    """Объект не найден (404)"""
    pass


class AccessDeniedError(PermissionError):
    """Объект принадлежит другому пользователю (403)"""
    pass
