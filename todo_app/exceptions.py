"""
Exception types raised by the todo core.

The core has a single rejection kind: :class:`InvalidArgumentError`. It is
raised synchronously for every validation failure and for every reference
to a task or task list that does not exist. The HTTP layer translates it
into a ``400`` error response (see :mod:`todo_app.errors`).
"""


class InvalidArgumentError(ValueError):
    """Raised when a request carries data the core refuses to accept."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
