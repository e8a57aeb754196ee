"""Domain models"""

from .order import InstrumentReference, OrderSide, OrderSpecification
from .response import ApiResponse, ResponseMetadata

__all__ = [
    "ApiResponse",
    "InstrumentReference",
    "OrderSide",
    "OrderSpecification",
    "ResponseMetadata",
]
