"""
Random-forest classification with leave-half-out cross-validation (LHOCV).
"""
from lhocv.data_loader import DataLoader, Dataset, TableSchema
from lhocv.exceptions import (
    ClassifierError,
    DegenerateClassError,
    InsufficientSampleError,
    SchemaError,
    TrainerFailure,
)
from lhocv.modeling import ClassifierTrainer, RandomForestTrainer
from lhocv.pipeline import ClassificationPipeline, TrainedModel
from lhocv.roc import ROCCurve, roc_auc
from lhocv.splitter import stratified_half_split
from lhocv.validation import ValidationReport, leave_half_out_validate

__version__ = "0.1"
