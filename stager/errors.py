"""Error taxonomy shared by services and routes.

Each error carries the HTTP status the route layer responds with. Storage
failures are not represented here: they are logged and never raised.
"""


class StagerError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(StagerError):
    status_code = 400
    message = "Invalid request"


class Unauthorized(StagerError):
    status_code = 401
    message = "Authentication required"


class Forbidden(StagerError):
    status_code = 403
    message = "Access denied"


class NotFound(StagerError):
    status_code = 404
    message = "Not found"


class InvalidSignature(StagerError):
    status_code = 403
    message = "Invalid signature"


class Expired(StagerError):
    status_code = 410
    message = "URL has expired"


class RateLimited(StagerError):
    status_code = 429
    message = "Rate limit exceeded"

    def __init__(self, status, message=None):
        super().__init__(message)
        self.status = status
