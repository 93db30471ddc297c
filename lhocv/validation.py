"""
Leave-half-out cross-validation (LHOCV).

The dataset is split once into two class-stratified halves. A model trained on
one half scores the other and vice versa, so every record receives exactly one
validation score from a model that never saw it. The merged scores are then
turned into one ROC curve per class.
"""
import time
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import pandas as pd

from lhocv.data_loader import Dataset
from lhocv.exceptions import DegenerateClassError
from lhocv.modeling import ClassifierTrainer
from lhocv.roc import ROCCurve, curves_to_frame, roc_for_class
from lhocv.splitter import stratified_half_split

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    """Merged validation scores and the per-class ROC curves computed from them."""
    scores: pd.DataFrame
    curves: List[ROCCurve]
    class_names: List[str]
    degenerate_classes: List[str] = field(default_factory=list)

    @property
    def auc(self) -> dict:
        return {c.class_name: c.auc for c in self.curves}

    def roc_frame(self) -> pd.DataFrame:
        return curves_to_frame(self.curves)


def score_rows(trainer: ClassifierTrainer, model, dataset: Dataset, class_names: List[str]) -> pd.DataFrame:
    """
    Score every record of ``dataset`` with ``model``.

    Returns a frame ``[id, *class_names, label]``. Classes the model never saw
    get probability 0.0.
    """
    proba = trainer.predict_proba(model, dataset.features)
    proba = pd.DataFrame(proba).reset_index(drop=True)
    proba.columns = [str(c) for c in proba.columns]
    unknown = [c for c in proba.columns if c not in class_names]
    if unknown:
        logger.warning(f"Model returned probabilities for unexpected classes {unknown}; dropping them")
    proba = proba.reindex(columns=class_names, fill_value=0.0)
    schema = dataset.schema
    table = pd.concat([
        pd.DataFrame({schema.id_column: dataset.ids.to_numpy()}),
        proba,
        pd.DataFrame({schema.label_column: dataset.labels.to_numpy()})
    ], axis=1)
    return table


def _train_and_score(trainer: ClassifierTrainer, train_part: Dataset, score_part: Dataset,
                     class_names: List[str], round_name: str) -> pd.DataFrame:
    start_time = time.time()
    logger.info(f"[LHOCV] Round {round_name}: training on {len(train_part)} rows, scoring {len(score_part)} rows")
    model = trainer.fit(train_part.features, train_part.labels)
    missing = sorted(set(class_names) - set(train_part.classes))
    if missing:
        logger.warning(f"[LHOCV] Round {round_name}: classes {missing} are absent from the training half; "
                       f"their probabilities will be 0")
    table = score_rows(trainer, model, score_part, class_names)
    logger.info(f"[LHOCV] Round {round_name} complete. Time: {time.time() - start_time:.2f}s")
    return table


def per_class_curves(scores: pd.DataFrame, class_names: List[str], label_column: str):
    """ROC curve for each class; a degenerate class is reported instead of aborting the rest."""
    curves = []
    degenerate = []
    for class_name in class_names:
        try:
            curve = roc_for_class(scores, class_name, label_column)
        except DegenerateClassError as e:
            logger.warning(f"[LHOCV] Skipping ROC curve: {e}")
            degenerate.append(class_name)
            continue
        logger.info(f"[LHOCV] {curve.label}")
        curves.append(curve)
    return curves, degenerate


def leave_half_out_validate(dataset: Dataset, trainer: ClassifierTrainer,
                            rng: Optional[np.random.Generator] = None,
                            seed: Optional[int] = None) -> ValidationReport:
    """
    Run both complementary rounds and compute the per-class ROC curves.

    Trainer errors are not caught.
    """
    start_time = time.time()
    class_names = dataset.classes
    hold, rest = stratified_half_split(dataset.labels, rng=rng, seed=seed)
    logger.info(f"[LHOCV] Validation started: {len(dataset)} rows, {len(class_names)} classes, "
                f"hold={len(hold)}, rest={len(rest)}")

    hold_part = dataset.subset(hold)
    rest_part = dataset.subset(rest)
    scores = pd.concat([
        _train_and_score(trainer, rest_part, hold_part, class_names, "1 (rest -> hold)"),
        _train_and_score(trainer, hold_part, rest_part, class_names, "2 (hold -> rest)")
    ], ignore_index=True)

    curves, degenerate = per_class_curves(scores, class_names, dataset.schema.label_column)
    logger.info(f"[LHOCV] Validation complete. Time: {time.time() - start_time:.2f}s")
    return ValidationReport(scores=scores, curves=curves, class_names=class_names,
                            degenerate_classes=degenerate)
