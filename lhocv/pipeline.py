"""
Training and prediction pipelines.
"""
import os
import time
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import joblib
import numpy as np
import pandas as pd

from lhocv.data_loader import Dataset, TableSchema
from lhocv.exceptions import ModelLoadError, SchemaError
from lhocv.modeling import ClassifierTrainer, RandomForestTrainer
from lhocv.validation import ValidationReport, leave_half_out_validate, score_rows

logger = logging.getLogger(__name__)


@dataclass
class TrainedModel:
    """A full-data model, the trainer able to apply it, and its LHOCV report."""
    model: Any
    trainer: ClassifierTrainer
    feature_columns: Tuple[str, ...]
    class_names: List[str]
    validation: ValidationReport

    def save(self, path: str):
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        joblib.dump(self, path)
        logger.info(f"Saved trained model to {path}")

    @classmethod
    def load(cls, path: str) -> "TrainedModel":
        try:
            obj = joblib.load(path)
        except Exception as e:
            logger.error(f"Could not load model from {path}: {e}")
            raise ModelLoadError(f"Could not load model from {path}: {e}") from e
        if not isinstance(obj, cls):
            raise ModelLoadError(f"{path} does not contain a {cls.__name__}, got {type(obj).__name__}")
        logger.info(f"Loaded trained model from {path}: classes={obj.class_names}")
        return obj


class ClassificationPipeline:
    """Trains a classifier with leave-half-out validation, or scores new data with a trained one."""
    def __init__(self, trainer: Optional[ClassifierTrainer] = None, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        self.trainer = trainer if trainer is not None else RandomForestTrainer()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        logger.info(f"Pipeline trainer: {type(self.trainer).__name__}, seed={seed}")

    def train(self, dataset: Dataset) -> TrainedModel:
        if dataset.has_missing_labels():
            raise SchemaError(f"Training data has missing values in label column '{dataset.schema.label_column}'")
        logger.info(f"[Pipeline] Training started. Data shape: {dataset.frame.shape}, classes: {dataset.classes}")
        start_time = time.time()
        model = self.trainer.fit(dataset.features, dataset.labels)
        report = leave_half_out_validate(dataset, self.trainer, rng=self.rng)
        logger.info(f"[Pipeline] Training complete. Time: {time.time() - start_time:.2f}s")
        return TrainedModel(
            model=model,
            trainer=self.trainer,
            feature_columns=tuple(dataset.schema.feature_columns),
            class_names=list(report.class_names),
            validation=report
        )

    def predict(self, dataset: Dataset, trained: TrainedModel) -> pd.DataFrame:
        """Return ``[id, *class_names]`` with one row per input record, in input order."""
        missing = [c for c in trained.feature_columns if c not in dataset.frame.columns]
        if missing:
            raise SchemaError(f"Prediction data is missing feature columns used in training: {missing}")
        logger.info(f"[Pipeline] Prediction started. Data shape: {dataset.frame.shape}")
        start_time = time.time()
        # reorder to the training layout; labels are never passed to the model
        aligned = Dataset(dataset.frame, TableSchema(
            dataset.schema.id_column, dataset.schema.label_column, trained.feature_columns))
        table = score_rows(trained.trainer, trained.model, aligned, trained.class_names)
        table = table.drop(columns=[dataset.schema.label_column])
        logger.info(f"[Pipeline] Prediction complete. Time: {time.time() - start_time:.2f}s")
        return table
