"""
ROC curves and AUC from ranked scores.
"""
import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
import pandas as pd

from lhocv.exceptions import DegenerateClassError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ROCCurve:
    """ROC curve of one class: per-row (FPR, TPR) points and the area under them."""
    class_name: str
    fpr: np.ndarray
    tpr: np.ndarray
    auc: float

    @property
    def label(self) -> str:
        return f"{self.class_name} (AUC={format(round(self.auc, 4), 'g')})"

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            'FPR': self.fpr,
            'TPR': self.tpr,
            'LBL': [self.label] * len(self.fpr)
        })


def roc_auc(scores: Sequence[float], truth: Sequence[int], class_name: str = "") -> ROCCurve:
    """
    Compute the ROC curve and its area for binary ``truth`` ranked by ``scores``.

    Rows are sorted by descending score (stable, so tied rows keep their input
    order). After each row, x is the fraction of negatives seen so far and y the
    fraction of positives. The area is the right-endpoint rectangle sum
    ``sum((x[i] - x[i-1]) * y[i])`` over the walk, which for untied scores is the
    Mann-Whitney estimate of AUC. Inside a block of tied scores the row order is
    meaningless, so the rectangle for the block takes the mean of the y values
    entering and leaving it.

    The returned ``fpr``/``tpr`` points are still one per row. When scores tie
    (common with forest probabilities) a right-endpoint sum over those points
    depends on the order of the tied rows and need not equal ``auc``.

    Raises:
        ValueError: If the inputs differ in length or ``truth`` is not 0/1.
        DegenerateClassError: If there are no positives or no negatives.
    """
    scores = np.asarray(scores, dtype=float)
    truth = np.asarray(truth)
    if scores.shape != truth.shape or scores.ndim != 1:
        raise ValueError(f"scores and truth must be 1-D and of equal length, "
                         f"got {scores.shape} and {truth.shape}")
    if not np.isin(truth, [0, 1]).all():
        raise ValueError("truth must only contain 0 and 1")
    truth = truth.astype(int)
    n_pos = int(truth.sum())
    n_neg = len(truth) - n_pos
    if n_pos == 0 or n_neg == 0:
        raise DegenerateClassError(
            f"Class '{class_name}' has {n_pos} positive and {n_neg} negative examples")

    order = np.argsort(-scores, kind='mergesort')
    ranked = truth[order]
    fpr = np.cumsum(ranked == 0) / n_neg
    tpr = np.cumsum(ranked == 1) / n_pos

    # index of the last row of each block of equal scores
    sorted_scores = scores[order]
    block_ends = np.flatnonzero(np.append(sorted_scores[1:] != sorted_scores[:-1], True))
    x = np.concatenate(([0.0], fpr[block_ends]))
    y = np.concatenate(([0.0], tpr[block_ends]))
    auc = float(np.sum(np.diff(x) * (y[1:] + y[:-1]) / 2.0))
    return ROCCurve(class_name=class_name, fpr=fpr, tpr=tpr, auc=auc)


def roc_for_class(score_table: pd.DataFrame, class_name: str, label_column: str) -> ROCCurve:
    """ROC curve of one class column of a validation score table."""
    truth = (score_table[label_column].astype(str) == class_name).astype(int)
    return roc_auc(score_table[class_name].to_numpy(), truth.to_numpy(), class_name=class_name)


def curves_to_frame(curves: List[ROCCurve]) -> pd.DataFrame:
    if not curves:
        return pd.DataFrame(columns=['FPR', 'TPR', 'LBL'])
    return pd.concat([c.to_frame() for c in curves], ignore_index=True)
