"""
Data loading and schema validation for the classifier.

Input tables are rectangular: one identifier column, one class label column
and any number of feature columns. The roles are captured once, at ingestion,
in a :class:`TableSchema` so that the rest of the package never relies on
column positions.
"""
import os
import logging
import tempfile
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import boto3
import numpy as np
import pandas as pd

from lhocv.exceptions import SchemaError

logger = logging.getLogger(__name__)


def download_from_s3(s3_path: str, local_path: str) -> str:
    s3 = boto3.client('s3')
    bucket, key = s3_path.replace("s3://", "").split("/", 1)
    s3.download_file(bucket, key, local_path)
    return local_path


class DataLoader:
    """Reads a CSV table from a local path or an ``s3://`` URI."""
    def __init__(self, filepath: str, download_dir: Optional[str] = None):
        self.filepath = filepath
        self.download_dir = download_dir

    def load(self) -> pd.DataFrame:
        path = self.filepath
        if path.startswith("s3://"):
            target_dir = self.download_dir or tempfile.mkdtemp(prefix="lhocv_")
            local_path = os.path.join(target_dir, os.path.basename(path))
            logger.info(f"Downloading {path} to {local_path}")
            path = download_from_s3(self.filepath, local_path)
        df = pd.read_csv(path)
        logger.info(f"Loaded {path}: shape={df.shape}")
        return df


@dataclass(frozen=True)
class TableSchema:
    """Declared roles of the columns of an input table."""
    id_column: str
    label_column: str
    feature_columns: Tuple[str, ...]

    @classmethod
    def positional(cls, columns: Sequence[str]) -> "TableSchema":
        """Column 1 is the identifier, column 2 the label, the rest are features."""
        columns = [str(c) for c in columns]
        if len(columns) < 3:
            raise SchemaError(
                f"Expected an identifier, a label and at least one feature column, got {columns}")
        return cls(columns[0], columns[1], tuple(columns[2:]))

    def validate(self, df: pd.DataFrame):
        if len(set(df.columns)) != len(df.columns):
            raise SchemaError("Duplicate column names in input table")
        missing = [c for c in (self.id_column, self.label_column) + self.feature_columns
                   if c not in df.columns]
        if missing:
            raise SchemaError(f"Missing columns: {missing}")
        if not self.feature_columns:
            raise SchemaError("No feature columns declared")
        if self.id_column in self.feature_columns or self.label_column in self.feature_columns:
            raise SchemaError("Identifier and label columns cannot be features")
        if self.id_column == self.label_column:
            raise SchemaError("Identifier and label must be different columns")
        if df.empty:
            raise SchemaError("Dataset is empty")
        ids = df[self.id_column]
        if ids.isnull().any():
            raise SchemaError(f"Identifier column '{self.id_column}' has missing values")
        duplicated = ids.astype(str)[ids.astype(str).duplicated()].unique().tolist()
        if duplicated:
            raise SchemaError(f"Duplicate identifiers: {duplicated[:10]}")


class Dataset:
    """An input table together with its validated schema."""
    def __init__(self, frame: pd.DataFrame, schema: Optional[TableSchema] = None):
        frame = frame.rename(columns=str)
        if schema is None:
            schema = TableSchema.positional(frame.columns)
        schema.validate(frame)
        self.frame = frame.reset_index(drop=True)
        self.schema = schema

    @classmethod
    def from_csv(cls, path: str, schema: Optional[TableSchema] = None) -> "Dataset":
        return cls(DataLoader(path).load(), schema)

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def ids(self) -> pd.Series:
        return self.frame[self.schema.id_column].astype(str)

    @property
    def labels(self) -> pd.Series:
        labels = self.frame[self.schema.label_column]
        return labels.where(labels.isnull(), labels.astype(str))

    @property
    def features(self) -> pd.DataFrame:
        return self.frame[list(self.schema.feature_columns)]

    @property
    def classes(self) -> List[str]:
        return sorted(self.labels.dropna().unique().tolist())

    def has_missing_labels(self) -> bool:
        return bool(self.frame[self.schema.label_column].isnull().any())

    def subset(self, indices: Sequence[int]) -> "Dataset":
        """
        Rows at the given positions, in the given order.

        The rows were validated with the parent table, so the result is not
        re-validated and may be empty.
        """
        part = Dataset.__new__(Dataset)
        part.frame = self.frame.iloc[np.asarray(indices, dtype=int)].reset_index(drop=True)
        part.schema = self.schema
        return part
