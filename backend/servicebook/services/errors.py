# backend/servicebook/services/errors.py
"""
Typed failures raised by the service layer.

main.py maps every ServiceError to a JSON response with `status_code`.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BadRequestError(ServiceError):
    status_code = 400


class UnauthorizedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class ServiceUnavailableError(ServiceError):
    status_code = 503
