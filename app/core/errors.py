"""
Error taxonomy for the scraping pipeline.

Only MissingInputError reaches the transport layer as a failure; every
ScraperError is converted into the error envelope by the pipeline.
"""
from typing import Optional


class ScraperError(Exception):
    """Base class for recoverable scraping failures."""


class MissingInputError(ValueError):
    """No URL was supplied to the parser."""

    def __init__(self, message: str = "Informe ?url=<link_encurtado_de_afiliado>"):
        super().__init__(message)


class FetchError(ScraperError):
    """The page could not be fetched (non-2xx status or transport failure)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BlockedError(ScraperError):
    """The store answered with a bot-check / captcha page."""

    def __init__(self, message: str = "Bloqueio/captcha detectado (robot check)."):
        super().__init__(message)
