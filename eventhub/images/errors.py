from eventhub.utils.errors import DomainError
from eventhub.utils.errors import ErrorCode


class ImageUploadError(DomainError):
    """Raised when the storage backend rejects an uploaded image."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.UPLOAD_FAILED, message="Upload failed")
