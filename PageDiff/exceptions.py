class PageDiffError(RuntimeError):
    """Base class for every fatal condition of a comparison run."""


class TransportError(PageDiffError):
    """Raised when an external tool could not be started or failed with an I/O fault."""


class RasterizationError(TransportError):
    """Raised when a document could not be handed to the rasterizer at all."""


class EnumerationError(PageDiffError):
    """Raised when a page directory or one of its entries cannot be accessed."""


class ConfigurationError(PageDiffError):
    """Raised for invalid inputs or unexpected content in an output location."""
