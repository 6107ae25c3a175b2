"""
Pipeline Errors
Typed failures raised by the favicon pipeline
"""


class FaviconError(Exception):
    """Base class for every pipeline failure"""


class NoSourceError(FaviconError):
    """No usable source image was supplied"""


class DecodeError(FaviconError):
    """An image could not be parsed as a raster"""


class EncodeError(FaviconError):
    """ICO encoding received an empty or invalid image list"""


class InvalidOptionsError(FaviconError):
    """Build options are structurally invalid"""


class BuildCancelledError(FaviconError):
    """The caller cancelled the build before it finished"""
