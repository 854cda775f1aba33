class ConversionFailure(RuntimeError):
    """Raised when pixel processing for a conversion or thumbnail fails."""

    def __init__(self, method: str, cause):
        self.method = method
        self.cause = cause
        super().__init__(f"{method} conversion failed: {cause}")


class ImageProcessingUnavailable(RuntimeError):
    """Raised when a pixel operation is attempted in degraded mode."""

    def __init__(self, message: str = "Image processing is not available on this host (degraded mode)"):
        super().__init__(message)
