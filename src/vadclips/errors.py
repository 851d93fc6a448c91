"""
Exception types raised by vadclips.

The accumulate/merge/encode pipeline is total and never raises for well
formed input, so everything here is about the edges: the external detector,
malformed containers handed to the decoder, and handles that have already
been released.
"""


class VadClipsError(Exception):
    pass


class DetectorInitError(VadClipsError):
    """The speech detector could not be initialized. Treated as fatal."""

    def __init__(self, *args, **kwargs):
        self.original_exception = kwargs.pop('original_exception', None)
        super().__init__(*args, **kwargs)


class ContainerFormatError(VadClipsError, ValueError):
    """Bytes handed to the decoder are not a canonical PCM16 mono WAV."""


class ClipRevokedError(VadClipsError, KeyError):
    """Handle is unknown to the store or has already been revoked."""
