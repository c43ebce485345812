"""
Fossil Store Exceptions

Transport and authentication failures are raised by boto3/botocore and are
never wrapped here.
"""


class StorageError(Exception):
    """Base exception for recoverable storage backend conditions"""

    pass


class BucketNotVersionedError(StorageError):
    """The bucket exists but object versioning is not enabled on it"""

    pass


class StorageContractError(RuntimeError):
    """The caller asked for an operation the backend never supports.

    Raised for move pairs that are neither a hide (``n`` -> ``n.fsl``) nor an
    unhide (``n.fsl`` -> ``n``). The engine and backend disagree on the fossil
    convention at that point, so callers should not treat this as a
    ``StorageError`` and carry on.
    """

    pass
