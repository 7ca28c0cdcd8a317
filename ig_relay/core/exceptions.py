from typing import Optional, Dict, Any


class BaseAppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class MalformedPayload(BaseAppException):
    """Inbound webhook body could not be parsed."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class UnsupportedSource(BaseAppException):
    """Webhook ``object`` is not the platform this relay serves."""
    def __init__(self, source: str):
        super().__init__(
            f"Unsupported webhook object: {source!r}",
            status_code=404,
            details={"object": source}
        )
        self.source = source


class DeliveryError(BaseAppException):
    """Graph API answered with a non-200 status."""
    def __init__(self, remote_status: int, body: str):
        super().__init__(
            f"HTTP Error: {remote_status}, Body: {body}",
            status_code=502,
            details={"remote_status": remote_status, "body": body}
        )
        self.remote_status = remote_status
        self.body = body


class TransportError(BaseAppException):
    """Outbound request could not be built or executed."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=502, details=details)

