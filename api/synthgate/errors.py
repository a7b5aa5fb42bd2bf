"""Exception types raised across the gate boundary."""


class GateUnavailableError(Exception):
    """A backing store could not be reached while admitting a request."""


class AdmissionRejected(Exception):
    """Raised by FastAPI dependencies to turn a Reject decision into a response."""

    def __init__(self, decision):
        super().__init__(decision.message)
        self.decision = decision


class PayloadRejected(Exception):
    """Request payload failed the size or content checks."""

    def __init__(self, code: str, message: str, status_code: int):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
