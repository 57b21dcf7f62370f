"""Base client exception."""


class PezeshaException(Exception):
    """
    Base exception for all errors raised by the Pezesha client.

    The code attribute identifies the failure class so callers can
    branch on it without inspecting the message.
    """

    def __init__(self, message: str, code: str = "PEZESHA_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)
