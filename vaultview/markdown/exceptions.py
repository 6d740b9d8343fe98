class RenderError(Exception):
    """Base class for failures that abort rendering of a document."""


class MarkdownEngineError(RenderError):
    """Pandoc could not be run, or rejected the document."""

    def __init__(self, message: str, stage: str = "convert"):
        super().__init__(message)
        self.stage = stage
