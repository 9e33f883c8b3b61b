"""
Error types raised while building a playlist.

Each error carries the HTTP status the dispatcher answers with and a
plain-text message that becomes the response body.
"""


class PlaylistError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientInputError(PlaylistError):
    """Bad request parameters (missing service, unknown region, ...)."""

    status_code = 400


class MalformedDocumentError(PlaylistError):
    """Feed document has neither `channels` nor `regions`, or bad entries."""

    status_code = 400


class UpstreamFetchError(PlaylistError):
    """Network failure, bad status or non-JSON body from an upstream feed."""

    status_code = 500
