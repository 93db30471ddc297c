"""
Decides between training and prediction mode.
"""
import os
import logging
from typing import Optional, Sequence

import pandas as pd

from lhocv.exceptions import InsufficientSampleError

logger = logging.getLogger(__name__)

TRAIN = "train"
PREDICT = "predict"

MIN_PER_CLASS = 5
MAX_CLASSES = 10


def check_training_preconditions(labels: Sequence, min_per_class: int = MIN_PER_CLASS,
                                 max_classes: int = MAX_CLASSES):
    """Raise InsufficientSampleError unless there are 2..max_classes classes of at least min_per_class rows."""
    counts = pd.Series(list(labels)).dropna().astype(str).value_counts()
    if len(counts) < 2:
        raise InsufficientSampleError(f"Training needs at least 2 classes, found {len(counts)}")
    if len(counts) > max_classes:
        raise InsufficientSampleError(f"Training supports at most {max_classes} classes, found {len(counts)}")
    small = counts[counts < min_per_class]
    if not small.empty:
        raise InsufficientSampleError(
            f"Every class needs at least {min_per_class} rows; too small: {small.to_dict()}")


def is_model_path(model_path: Optional[str]) -> bool:
    return bool(model_path) and model_path.upper() != "NA" and os.path.isfile(model_path)


def select_mode(train_flag: bool, labels: Sequence, model_path: Optional[str] = None,
                min_per_class: int = MIN_PER_CLASS, max_classes: int = MAX_CLASSES) -> Optional[str]:
    """
    Return ``"train"``, ``"predict"`` or ``None``.

    Training runs when requested and the sample-size guard passes. Otherwise an
    existing model file selects prediction. Otherwise nothing runs.
    """
    if train_flag:
        try:
            check_training_preconditions(labels, min_per_class, max_classes)
            return TRAIN
        except InsufficientSampleError as e:
            logger.warning(f"Training mode refused: {e}")
    if is_model_path(model_path):
        return PREDICT
    logger.warning(f"No valid model file at {model_path!r}; nothing to do")
    return None
