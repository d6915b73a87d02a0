"""
core/exceptions.py   Application Exceptions
========================================================
Errors raised upstream of the error-handling stage. Each one carries
the fields the stage reads: message, status, path and code.
"""


class AppError(Exception):
    """Base class for all application-specific exceptions."""
    status = None
    code = None

    def __init__(self, message=None, status=None, path=None, code=None):
        super().__init__(message)
        self.message = message or "An internal server error occurred"
        if status is not None:
            self.status = status
        if code is not None:
            self.code = code
        self.path = path


class MalformedURIError(AppError):
    """The request path could not be decoded."""
    status = 400


class BlacklistedIPError(AppError):
    """The remote address matched the IP blacklist."""
    status = 403
    code = 'blacklisted-ip'


class RedirectSignal(AppError):
    """Raised by a route to send the client elsewhere (302 or 308)."""
    status = 302

    def __init__(self, path, status=302, message='Redirect'):
        super().__init__(message, status=status, path=path)


class HeadersSentError(RuntimeError):
    """A second write was attempted on a response that was already written."""
