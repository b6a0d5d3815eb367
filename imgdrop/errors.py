class UploadError(Exception):
    """Request-scoped failure, rendered as an UploadResponse with `status_code`."""

    status_code = 500
    message = "Internal server error."

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthorized(UploadError):
    status_code = 401
    message = "Invalid or missing TOTP token"


class BadRequest(UploadError):
    status_code = 400
    message = "Bad request."


class UnsupportedMediaType(UploadError):
    # reported as a plain 400, same as the browser client has always seen
    status_code = 400
    message = "File format is not supported. Only JPEG, PNG, and GIF images are allowed."


class PayloadTooLarge(UploadError):
    status_code = 413
    message = "The uploaded file is too big."


class InternalError(UploadError):
    status_code = 500
    message = "Unable to save the file."
