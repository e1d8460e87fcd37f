"""
Orders services package.

- OrderPayloadBuilder: cart state -> order submission payload
- OrderSubmissionService: submit, then clear the cart or leave it for retry
"""

from .payload_builder import OrderPayloadBuilder, generate_client_id
from .submission_service import OrderSubmissionService

__all__ = [
    "OrderPayloadBuilder",
    "OrderSubmissionService",
    "generate_client_id",
]
