class InvalidInput(Exception):
    """Raised when a request is missing required fields or has the wrong shape.

    Surfaced to the caller before any analysis work starts.
    """

    def __init__(self, error_code: str, message: str):
        super().__init__(message)
        self.error_code = error_code
        self.message = message


class EnrichmentUnavailable(Exception):
    """Raised by an enrichment provider that produced no usable text.

    Never leaves the enrichment service; callers see ``ai_enhanced=False``.
    """

    def __init__(self, provider: str, reason: str):
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason
