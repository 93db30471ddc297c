"""
Writes training and prediction artifacts to an output directory.
"""
import os
import re
import json
import shutil
import logging
from typing import Dict

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from lhocv.data_loader import Dataset
from lhocv.pipeline import TrainedModel
from lhocv.validation import ValidationReport

logger = logging.getLogger(__name__)

MODEL_FILE = 'rf_model.joblib'
ROC_FILE = 'roc_curve.csv'
ROC_PLOT_FILE = 'roc_curve.png'
VALIDATION_FILE = 'validation_data.csv'
SUMMARY_FILE = 'validation_summary.json'
PREDICTION_FILE = 'prediction_data.csv'


def prepare_output_dir(path: str) -> str:
    """Start from an empty directory; previous results are removed."""
    if os.path.isdir(path):
        logger.info(f"Removing previous output directory {path}")
        shutil.rmtree(path)
    os.makedirs(path)
    return path


def sanitize_columns(df: pd.DataFrame) -> pd.DataFrame:
    return df.rename(columns=lambda c: re.sub(r"\W", "_", str(c)))


def _keyed_frame(dataset: Dataset) -> pd.DataFrame:
    df = dataset.frame.copy()
    df[dataset.schema.id_column] = dataset.ids
    df[dataset.schema.label_column] = dataset.labels
    return df


def validation_table(report: ValidationReport, dataset: Dataset) -> pd.DataFrame:
    """Validation scores joined with the original rows: id, label, class scores, features."""
    schema = dataset.schema
    keys = [schema.id_column, schema.label_column]
    scores = report.scores[keys + report.class_names]
    return scores.merge(_keyed_frame(dataset), on=keys, how='left', suffixes=('', '_feature'))


def prediction_table(predictions: pd.DataFrame, dataset: Dataset) -> pd.DataFrame:
    """Prediction scores as ``Prob_<class>`` columns joined with the original rows."""
    id_column = dataset.schema.id_column
    probs = predictions.rename(columns=lambda c: c if c == id_column else f"Prob_{c}")
    return probs.merge(_keyed_frame(dataset), on=id_column, how='left')


def validation_summary(report: ValidationReport) -> Dict:
    return {
        'n_rows': int(len(report.scores)),
        'classes': list(report.class_names),
        'auc': {k: float(v) for k, v in report.auc.items()},
        'degenerate_classes': list(report.degenerate_classes),
    }


def plot_roc_curves(report: ValidationReport, path: str):
    roc = report.roc_frame()
    fig, ax = plt.subplots(figsize=(7, 6))
    try:
        sns.lineplot(data=roc, x='FPR', y='TPR', hue='LBL', drawstyle='steps-post',
                     estimator=None, sort=False, ax=ax)
        ax.plot([0, 1], [0, 1], linestyle='--', color='grey', linewidth=1)
        ax.set_xlim(0, 1)
        ax.set_ylim(0, 1.02)
        ax.set_title("Leave-half-out cross-validation ROC")
        fig.tight_layout()
        fig.savefig(path)
    finally:
        plt.close(fig)


def write_training_outputs(trained: TrainedModel, dataset: Dataset, output_dir: str,
                           plot: bool = True) -> Dict[str, str]:
    report = trained.validation
    paths = {
        'model': os.path.join(output_dir, MODEL_FILE),
        'roc': os.path.join(output_dir, ROC_FILE),
        'validation': os.path.join(output_dir, VALIDATION_FILE),
        'summary': os.path.join(output_dir, SUMMARY_FILE),
    }
    trained.save(paths['model'])
    report.roc_frame().to_csv(paths['roc'], index=False)
    sanitize_columns(validation_table(report, dataset)).to_csv(paths['validation'], index=False)
    with open(paths['summary'], 'w') as f:
        json.dump(validation_summary(report), f, indent=2)
    if plot and report.curves:
        plot_path = os.path.join(output_dir, ROC_PLOT_FILE)
        try:
            plot_roc_curves(report, plot_path)
            paths['roc_plot'] = plot_path
        except (ValueError, RuntimeError) as e:
            logger.warning(f"Could not plot ROC curves: {e}")
    logger.info(f"Wrote training outputs: {paths}")
    return paths


def write_prediction_outputs(predictions: pd.DataFrame, dataset: Dataset, output_dir: str) -> Dict[str, str]:
    paths = {'predictions': os.path.join(output_dir, PREDICTION_FILE)}
    sanitize_columns(prediction_table(predictions, dataset)).to_csv(paths['predictions'], index=False)
    logger.info(f"Wrote prediction outputs: {paths}")
    return paths
