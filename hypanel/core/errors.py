"""Request-terminal error kinds shared by services and routes."""


class PanelError(Exception):
    """Base class for failures reported to the client.

    ``message`` is sent to the client. ``detail`` carries server-side context
    (command output, absolute paths) and only ever reaches the action log.
    """

    error = "panel_error"
    status_code = 500
    default_message = "Request failed."

    def __init__(self, message=None, detail=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.detail = detail

    @property
    def log_message(self):
        if not self.detail:
            return self.message
        return f"{self.message} {self.detail}"

    def to_payload(self):
        return {"ok": False, "error": self.error, "message": self.message}


class AccessDenied(PanelError):
    """Requested path escapes the server directory."""

    error = "access_denied"
    status_code = 403
    default_message = "Access denied."


class NotFound(PanelError):
    """Requested path is inside the server directory but absent."""

    error = "not_found"
    status_code = 404
    default_message = "Not found."


class IOFailure(PanelError):
    """Filesystem or external command failed for another reason."""

    error = "io_failure"
    status_code = 500
    default_message = "Operation failed."


class InvalidAction(PanelError):
    error = "invalid_action"
    status_code = 400
    default_message = "Invalid action."
