from fastapi import HTTPException, status


class ApiError(HTTPException):  # type: ignore
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal Server Error'

    def __init__(self, detail: str = ''):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail or self.default_detail,
        )


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Bad Request'


class UnauthorizedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Not authenticated'


class ForbiddenError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Forbidden'


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not Found'
