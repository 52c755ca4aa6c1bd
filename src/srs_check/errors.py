class SrsCheckError(Exception):
    """Base class for srs-check errors"""


class ConfigError(SrsCheckError):
    """Invalid or missing configuration; aborts the whole run"""


class AmbiguousEmphasisError(SrsCheckError):
    """Bold and code-span markers overlap in a way that has no single reading"""

    def __init__(self, text: str, detail: str):
        super().__init__(f"{detail}: {text!r}")
        self.text = text
        self.detail = detail
