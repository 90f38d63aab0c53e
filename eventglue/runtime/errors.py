"""Runtime failure type raised by generated fetch adapters."""


class HandlerFault(Exception):
    """
    Unrecoverable failure of a fetch invocation.

    Raised by adapters generated without respond_with_errors when the
    handler fails. Hosts abort the invocation; no response is produced.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
