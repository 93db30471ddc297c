"""
Classifier trainer capability and its random-forest implementation.

The validation and prediction code only talks to a :class:`ClassifierTrainer`:
``fit`` turns labeled features into an opaque model and ``predict_proba`` turns
a model and unlabeled features into one probability column per class. Any
object honouring this interface can be plugged in, which is how the tests run
the core against deterministic stubs.
"""
import time
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

import pandas as pd
from sklearn.ensemble import RandomForestClassifier

from lhocv.exceptions import TrainerFailure
from lhocv.feature_engineering import FeatureEncoder

logger = logging.getLogger(__name__)


class ClassifierTrainer(ABC):
    """Produces models from labeled data and class probabilities from models."""

    @abstractmethod
    def fit(self, features: pd.DataFrame, labels: pd.Series) -> Any:
        """Train on ``features`` (no identifier column) against string ``labels``."""

    @abstractmethod
    def predict_proba(self, model: Any, features: pd.DataFrame) -> pd.DataFrame:
        """Return a frame with one row per input row and one column per class known to ``model``."""


@dataclass
class ForestModel:
    encoder: FeatureEncoder
    estimator: RandomForestClassifier

    @property
    def classes(self) -> List[str]:
        return [str(c) for c in self.estimator.classes_]


class RandomForestTrainer(ClassifierTrainer):
    """Random forest on one-hot encoded, imputed features."""
    def __init__(self, n_estimators: int = 500, random_state: Optional[int] = None,
                 n_jobs: Optional[int] = None):
        self.n_estimators = n_estimators
        self.random_state = random_state
        self.n_jobs = n_jobs

    def fit(self, features: pd.DataFrame, labels: pd.Series) -> ForestModel:
        start_time = time.time()
        encoder = FeatureEncoder()
        estimator = RandomForestClassifier(
            n_estimators=self.n_estimators,
            random_state=self.random_state,
            n_jobs=self.n_jobs
        )
        try:
            X = encoder.fit_transform(features)
            estimator.fit(X, labels.astype(str).to_numpy())
        except ValueError as e:
            logger.error(f"Random forest training failed: {e}")
            raise TrainerFailure(f"Random forest training failed: {e}") from e
        logger.info(f"[RandomForest] Trained {self.n_estimators} trees on {features.shape[0]} rows, "
                    f"{len(estimator.classes_)} classes. Time: {time.time() - start_time:.2f}s")
        return ForestModel(encoder=encoder, estimator=estimator)

    def predict_proba(self, model: ForestModel, features: pd.DataFrame) -> pd.DataFrame:
        proba = model.estimator.predict_proba(model.encoder.transform(features))
        return pd.DataFrame(proba, columns=model.classes, index=features.index)
