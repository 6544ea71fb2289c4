# lms_chat/core/exceptions.py
"""Custom exceptions for the chat server."""
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class ChatServerException(HTTPException):
    """Base exception for the chat server."""
    def __init__(
        self,
        status_code: int,
        detail: Any,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class UserNotFound(ChatServerException):
    """Raised when an external identity has no matching user row."""
    def __init__(self):
        super().__init__(status_code=404, detail="User not found")


class UsersNotFound(ChatServerException):
    """Raised when either participant of a new chat cannot be resolved."""
    def __init__(self):
        super().__init__(status_code=404, detail="Users not found")


class InvalidUser(ChatServerException):
    def __init__(self):
        super().__init__(status_code=400, detail="User invalid")


class FileNotFound(ChatServerException):
    def __init__(self):
        super().__init__(status_code=404, detail="File not found")


class NoFileUploaded(ChatServerException):
    def __init__(self):
        super().__init__(status_code=400, detail="No file uploaded")


class FileTooLarge(ChatServerException):
    def __init__(self, limit: int):
        super().__init__(
            status_code=413,
            detail=f"File exceeds the {limit} byte upload limit"
        )


class DatabaseError(ChatServerException):
    """Raised for store failures; the message is passed through to the client."""
    def __init__(self, message: str):
        super().__init__(status_code=500, detail=message)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle exceptions that escaped the route handlers"""
    logger.error(f"Unexpected error: {str(exc)} - Path: {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )
