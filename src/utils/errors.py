# src/utils/errors.py


class ArgonautsError(Exception):
    """Base class for errors raised by the float explorer"""


class LoadError(ArgonautsError):
    """The float dataset could not be fetched or parsed"""

    def __init__(self, source: str, cause: str):
        self.source = source
        self.cause = cause
        super().__init__(f"Could not load dataset from {source}: {cause}")


class NetworkError(ArgonautsError):
    """The chat webhook call failed"""
