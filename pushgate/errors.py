class GatewayError(Exception):
    pass


class QueueError(GatewayError):
    """
    The broker could not accept a job.

    Raised by queue implementations; never used for problems with the
    incoming event itself.
    """

    def __init__(self, queue: str, message: str) -> None:
        super().__init__(f"{queue}: {message}")
        self.queue = queue
        self.message = message
