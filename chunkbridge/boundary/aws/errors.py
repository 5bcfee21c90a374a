"""
Classification of AWS SDK failures into transient and permanent errors.

Bedrock and S3 Vectors calls surface botocore exceptions, sometimes wrapped
by langchain in a ValueError. The original botocore exception is found by
walking the __cause__/__context__ chain.

Dependencies: botocore
System role: Shared error mapping for Bedrock and S3 Vectors adapters
"""

from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from chunkbridge.core.exceptions import (
    ExternalServiceError,
    PermanentExternalError,
    TransientExternalError,
)

TRANSIENT_ERROR_CODES = frozenset(
    {
        "ThrottlingException",
        "TooManyRequestsException",
        "ServiceQuotaExceededException",
        "ServiceUnavailableException",
        "InternalServerException",
        "ModelNotReadyException",
        "ModelTimeoutException",
        "RequestTimeoutException",
        "SlowDown",
    }
)

TRANSIENT_NETWORK_ERRORS = (EndpointConnectionError, ReadTimeoutError, ConnectTimeoutError)


def iter_exception_chain(exc: BaseException):
    """Yield exc and every exception it was raised from or during."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def get_error_code(exc: BaseException) -> str | None:
    """Return the botocore ClientError code anywhere in the chain, if any."""
    for err in iter_exception_chain(exc):
        if isinstance(err, ClientError):
            return err.response.get("Error", {}).get("Code")
    return None


def is_transient(exc: BaseException) -> bool:
    """True when the failure is throttling, quota, availability or network related."""
    for err in iter_exception_chain(exc):
        if isinstance(err, TRANSIENT_NETWORK_ERRORS):
            return True
        if isinstance(err, ClientError):
            return err.response.get("Error", {}).get("Code") in TRANSIENT_ERROR_CODES
    return False


def classify_aws_error(
    exc: BaseException,
    service: str,
    operation: str,
) -> ExternalServiceError:
    """
    Map an AWS SDK failure to the pipeline's error taxonomy.

    Args:
        exc: Exception raised by boto3 / langchain-aws
        service: Collaborator name (embedding, vector_index)
        operation: Failing operation (embed, put_vectors, get_vectors)

    Returns:
        TransientExternalError or PermanentExternalError (caller raises it from exc)
    """
    code = get_error_code(exc)
    details = {"error_type": type(exc).__name__}
    if code:
        details["error_code"] = code

    error_cls = TransientExternalError if is_transient(exc) else PermanentExternalError
    return error_cls(
        message=f"{service} {operation} failed: {exc}",
        service=service,
        operation=operation,
        details=details,
    )
