# barbershop/errors.py

class DomainError(Exception):
    """A business-rule failure that maps straight onto an HTTP status."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class NotFoundError(DomainError):
    def __init__(self, detail: str):
        super().__init__(404, detail)


class ConflictError(DomainError):
    def __init__(self, detail: str):
        super().__init__(409, detail)
