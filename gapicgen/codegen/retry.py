"""Retry policy synthesis from HTTP annotations.

Only idempotent reads are retried: a method is retryable when its
``google.api.http`` binding uses ``GET``. Every retryable method of a service
shares one backoff policy; the values below are fixed and not read from any
annotation.
"""

import logging
from dataclasses import dataclass

from gapicgen.descriptors import MethodDescriptor, ServiceDescriptor

logger = logging.getLogger(__name__)

__all__ = [
    'DEFAULT_RETRY_POLICY',
    'RetryPolicy',
    'is_retryable',
    'synthesize',
]

READ_VERB = 'GET'


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff settings attached to a retryable method.

    Attributes:
        codes: gRPC status codes that trigger a retry, in emission order.
        initial: Go expression for the first backoff delay.
        max: Go expression for the largest backoff delay.
        multiplier: Growth factor between consecutive delays.
    """

    codes: tuple[str, ...]
    initial: str
    max: str
    multiplier: float


DEFAULT_RETRY_POLICY = RetryPolicy(
    codes=('Internal', 'Unavailable'),
    initial='100 * time.Millisecond',
    max='time.Minute',
    multiplier=1.3,
)


def is_retryable(method: MethodDescriptor) -> bool:
    """Report whether calls to ``method`` may be retried.

    Methods without an HTTP binding, or bound through a ``custom`` pattern,
    are not retried even when the custom kind reads ``get``. Streaming
    methods are never retried, whatever their binding says.
    """
    if method.client_streaming or method.server_streaming:
        return False
    if method.http is None or method.http.custom:
        return False
    return method.http.verb.upper() == READ_VERB


def synthesize(service: ServiceDescriptor) -> dict[str, RetryPolicy]:
    """Map the name of every retryable method of ``service`` to its policy.

    Methods missing from the result get empty call options.
    """
    policies = {
        m.name: DEFAULT_RETRY_POLICY for m in service.methods if is_retryable(m)
    }
    logger.debug(
        'Service %s: %d of %d methods retryable',
        service.name,
        len(policies),
        len(service.methods),
    )
    return policies
