"""Error kinds raised by the verification cache."""


class StorageUnavailable(Exception):
    """The backing store could not be reached within its timeout.

    Callers should treat the attempt as indeterminate and allow a retry; it must
    never be reported to a user as an incorrect code.
    """
