"""
Class-stratified half split used by leave-half-out cross-validation.
"""
import logging
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from lhocv.exceptions import SchemaError

logger = logging.getLogger(__name__)


def hold_size(n: int) -> int:
    """Rows of a class of size ``n`` that go to the held half."""
    return max(1, n // 2)


def stratified_half_split(labels: Sequence, rng: Optional[np.random.Generator] = None,
                          seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Partition row positions into ``(hold, rest)``.

    For every class of size n, ``max(1, n // 2)`` positions are drawn without
    replacement into ``hold``; the remaining positions of the class go to
    ``rest``. A single-member class therefore ends up entirely in ``hold``.

    Args:
        labels: Class label of each row.
        rng: Random generator used for the draws. Takes precedence over ``seed``.
        seed: Seed for a fresh generator when ``rng`` is not given.

    Returns:
        ``hold`` in draw order (classes in order of first appearance) and
        ``rest`` in ascending row order.
    """
    if rng is None:
        rng = np.random.default_rng(seed)
    labels = pd.Series(list(labels))
    if labels.isnull().any():
        raise SchemaError("Cannot stratify rows with missing class labels")
    positions = np.arange(len(labels))
    draws = []
    for cls in labels.unique():
        members = positions[(labels == cls).to_numpy()]
        draws.append(rng.choice(members, size=hold_size(len(members)), replace=False))
    hold = np.concatenate(draws).astype(int) if draws else np.zeros(0, dtype=int)
    rest = np.setdiff1d(positions, hold)
    logger.debug(f"[Splitter] {labels.nunique()} classes: hold={len(hold)}, rest={len(rest)}")
    return hold, rest
