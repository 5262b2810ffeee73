# hullbox/solver.py
from __future__ import annotations
from typing import Sequence

import numpy as np

from .errors import SingularSystemError

# вище цього числа обумовленості система вважається виродженою
COND_LIMIT = 1.0 / np.finfo(float).eps


def solve_linear(a: Sequence[Sequence[float]], b: Sequence[float]) -> np.ndarray:
    """
    Розв'язати A·x = b для квадратної A.
    Без стану між викликами; SingularSystemError для виродженої чи погано
    обумовленої системи.
    """
    A = np.asarray(a, dtype=float)
    B = np.asarray(b, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Coefficient matrix must be square, got shape {A.shape}")
    if B.shape != (A.shape[0],):
        raise ValueError(f"Constant vector must have shape ({A.shape[0]},), got {B.shape}")
    if not np.all(np.isfinite(A)) or not np.all(np.isfinite(B)):
        raise SingularSystemError("Linear system has non-finite coefficients")
    if np.linalg.cond(A) > COND_LIMIT:
        raise SingularSystemError("Linear system is singular or ill-conditioned")
    try:
        x = np.linalg.solve(A, B)
    except np.linalg.LinAlgError as e:
        raise SingularSystemError(f"Cannot solve linear system: {e}") from e
    if not np.all(np.isfinite(x)):
        raise SingularSystemError("Linear system solution is not finite")
    return x
