"""
Feature encoding for the random forest: numeric imputation and one-hot encoding of categoricals.
"""
import time
import logging
from typing import Dict, List

import numpy as np
import pandas as pd
from sklearn.impute import SimpleImputer
from sklearn.preprocessing import OneHotEncoder

from lhocv.exceptions import SchemaError

logger = logging.getLogger(__name__)

MISSING_CATEGORY = "__missing__"


class FeatureEncoder:
    """Turns a mixed numeric/categorical feature frame into a numeric matrix."""
    def __init__(self, impute_strategy: str = 'median'):
        self.impute_strategy = impute_strategy
        self.numeric_features: List[str] = []
        self.categorical_features: List[str] = []
        self.imputer = None
        self.onehot = None
        self.is_fitted = False

    def identify_feature_types(self, df: pd.DataFrame) -> Dict[str, List[str]]:
        self.numeric_features = []
        self.categorical_features = []
        for col in df.columns:
            if pd.api.types.is_bool_dtype(df[col]) or not pd.api.types.is_numeric_dtype(df[col]):
                self.categorical_features.append(col)
            else:
                self.numeric_features.append(col)
        return {
            'numeric_features': self.numeric_features,
            'categorical_features': self.categorical_features
        }

    def _numeric_block(self, df: pd.DataFrame) -> pd.DataFrame:
        block = {}
        for col in self.numeric_features:
            try:
                block[col] = df[col].astype(float)
            except (ValueError, TypeError) as e:
                raise SchemaError(f"Feature column '{col}' was numeric in training but holds non-numeric values: {e}") from e
        return pd.DataFrame(block, index=df.index)

    def _categorical_block(self, df: pd.DataFrame) -> pd.DataFrame:
        return df[self.categorical_features].astype(object).where(
            df[self.categorical_features].notnull(), MISSING_CATEGORY).astype(str)

    def fit_transform(self, df: pd.DataFrame) -> np.ndarray:
        start_time = time.time()
        self.identify_feature_types(df)
        blocks = []
        if self.numeric_features:
            # keep_empty_features keeps all-missing columns so fit and transform widths agree
            self.imputer = SimpleImputer(strategy=self.impute_strategy, keep_empty_features=True)
            blocks.append(self.imputer.fit_transform(df[self.numeric_features].astype(float)))
        if self.categorical_features:
            self.onehot = OneHotEncoder(handle_unknown='ignore', sparse_output=False)
            blocks.append(self.onehot.fit_transform(self._categorical_block(df)))
        self.is_fitted = True
        out = np.hstack(blocks)
        logger.debug(f"[FeatureEncoder] fit_transform: numeric={self.numeric_features}, "
                     f"categorical={self.categorical_features}, output shape={out.shape}, "
                     f"time={time.time() - start_time:.2f}s")
        return out

    def transform(self, df: pd.DataFrame) -> np.ndarray:
        if not self.is_fitted:
            raise ValueError("FeatureEncoder is not fitted. Call fit_transform() first.")
        blocks = []
        if self.numeric_features:
            blocks.append(self.imputer.transform(self._numeric_block(df)))
        if self.categorical_features:
            blocks.append(self.onehot.transform(self._categorical_block(df)))
        return np.hstack(blocks)
