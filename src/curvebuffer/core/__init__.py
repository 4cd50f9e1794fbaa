"""Core buffer algorithms for curvebuffer.

This module contains the core algorithms for:

- Join and cap generation (round, bevel, mitre / round, square, butt)
- Parallel and ring assembly from offset pieces
- Self-intersection removal on assembled rings
- Buffer orchestration and file processing

All services are designed to be:
- Stateless once constructed (safe to share between callers)
- Deterministic (results depend only on the order of the pieces)

Key classes:
- JoinFactory, CapFactory: Connective geometry at vertices and extremities
- BufferAssembler: Builds parallels and closed offset rings
- SelfIntersectionResolver: Removes overshoot loops
- BufferCalculator: Public entry point, returns BufferDomain
- BufferProcessor: File-to-file pipeline
"""

from curvebuffer.core.assembler import BufferAssembler, Joint, PieceOrigin, RingPiece
from curvebuffer.core.calculator import (
    BufferCalculator,
    BufferResult,
    create_cap_factory,
    create_join_factory,
    get_default_instance,
)
from curvebuffer.core.caps import ButtCapFactory, CapFactory, RoundCapFactory, SquareCapFactory
from curvebuffer.core.geometry import is_convex_turn, is_u_turn, tangent_intersection
from curvebuffer.core.joins import BevelJoinFactory, JoinFactory, MitreJoinFactory, RoundJoinFactory
from curvebuffer.core.processor import BufferProcessor, buffer_entry
from curvebuffer.core.resolver import SelfIntersectionResolver

__all__ = [
    # Joins
    "BevelJoinFactory",
    "JoinFactory",
    "MitreJoinFactory",
    "RoundJoinFactory",
    # Caps
    "ButtCapFactory",
    "CapFactory",
    "RoundCapFactory",
    "SquareCapFactory",
    # Assembly
    "BufferAssembler",
    "Joint",
    "PieceOrigin",
    "RingPiece",
    "SelfIntersectionResolver",
    # Calculator
    "BufferCalculator",
    "BufferResult",
    "create_cap_factory",
    "create_join_factory",
    "get_default_instance",
    # Processor
    "BufferProcessor",
    "buffer_entry",
    # Geometry functions
    "is_convex_turn",
    "is_u_turn",
    "tangent_intersection",
]
