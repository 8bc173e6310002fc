class ExtractionError(Exception):
    """Raised when no text can be read from an uploaded resume."""


class PdfExtractionError(ExtractionError):
    pass


class DocumentExtractionError(ExtractionError):
    pass


class UnsupportedFileType(ExtractionError):
    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported file format: {extension or '(none)'}")
