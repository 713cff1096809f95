from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from ..common.validators import is_real_number
from ..core.constants import FACE_DESCRIPTOR_LENGTH, FACE_MATCH_THRESHOLD
from ..core.exceptions import InvalidDescriptorError
from .model import FaceVerification


def validate_descriptor(values: Any) -> tuple[float, ...]:
    """Accept exactly 128 finite numbers, otherwise raise InvalidDescriptorError."""

    if not isinstance(values, (list, tuple)) or len(values) != FACE_DESCRIPTOR_LENGTH:
        raise InvalidDescriptorError()
    if not all(is_real_number(v) for v in values):
        raise InvalidDescriptorError()
    return tuple(float(v) for v in values)


def euclidean_distance(stored: Sequence[float], supplied: Sequence[float]) -> float:
    a = np.asarray(stored, dtype=np.float64)
    b = np.asarray(supplied, dtype=np.float64)
    if a.shape != (FACE_DESCRIPTOR_LENGTH,) or b.shape != (FACE_DESCRIPTOR_LENGTH,):
        raise InvalidDescriptorError()
    return float(np.linalg.norm(a - b))


class FaceMatcher:
    """Naive acceptance test: Euclidean distance strictly below a fixed threshold."""

    def __init__(self, threshold: float = FACE_MATCH_THRESHOLD):
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        self._threshold = float(threshold)

    @property
    def threshold(self) -> float:
        return self._threshold

    def compare(self, stored: Sequence[float], supplied: Sequence[float]) -> FaceVerification:
        distance = euclidean_distance(stored, supplied)
        return FaceVerification(
            verified=distance < self._threshold,
            distance=distance,
            confidence=1 - (distance / self._threshold),
            threshold=self._threshold,
        )
