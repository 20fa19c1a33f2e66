"""The enrollment identifier allocator and its pipeline stages.

Control flow: cohort context -> duplicate detector -> sequence resolver
-> collision guard (commit). Each stage can short-circuit the attempt.
"""

from enrolctl.allocation.allocator import Allocator
from enrolctl.allocation.cohort_context import CohortContextResolver
from enrolctl.allocation.collision import CollisionGuard
from enrolctl.allocation.duplicates import DuplicateDetector
from enrolctl.allocation.sequence import SequenceResolver

__all__ = [
    "Allocator",
    "CohortContextResolver",
    "CollisionGuard",
    "DuplicateDetector",
    "SequenceResolver",
]
