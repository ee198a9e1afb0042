class ShortenerError(Exception):
    """Base error. ``detail`` is safe to show to clients."""

    status_code = 500
    detail = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.detail)


class EmptyURLError(ShortenerError):
    status_code = 400
    detail = "URL must not be empty"


class AliasInUseError(ShortenerError):
    status_code = 400
    detail = "Custom alias already in use"


class NotFoundError(ShortenerError):
    status_code = 404
    detail = "URL not found"


class ExpiredError(ShortenerError):
    status_code = 410
    detail = "This URL has expired"


class RandomSourceError(ShortenerError):
    pass


class PersistenceError(ShortenerError):
    pass


class TokenExhaustionError(ShortenerError):
    pass
