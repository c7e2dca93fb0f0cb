from canvaswiki.schemas.schemas import (
    CommentResponse,
    UploadResponse,
)

__all__ = [
    "CommentResponse",
    "UploadResponse",
]
