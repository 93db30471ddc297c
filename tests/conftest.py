import numpy as np
import pandas as pd
import pytest

from lhocv.data_loader import Dataset
from lhocv.modeling import ClassifierTrainer


class MemorizingTrainer(ClassifierTrainer):
    """Remembers the label of every training row; unseen rows get a uniform distribution."""
    def __init__(self):
        self.fit_calls = []

    def fit(self, features, labels):
        self.fit_calls.append(len(features))
        memo = {tuple(row): label for row, label in zip(features.itertuples(index=False), labels)}
        return {'memo': memo, 'classes': sorted(set(labels))}

    def predict_proba(self, model, features):
        classes = model['classes']
        if not classes:
            return pd.DataFrame(index=range(len(features)))
        rows = []
        for row in features.itertuples(index=False):
            label = model['memo'].get(tuple(row))
            if label is None:
                rows.append([1.0 / len(classes)] * len(classes))
            else:
                rows.append([1.0 if c == label else 0.0 for c in classes])
        return pd.DataFrame(rows, columns=classes, index=range(len(rows)))


class ColumnTrainer(ClassifierTrainer):
    """Reads each class probability straight from the feature column named after the class."""
    def fit(self, features, labels):
        return sorted(set(labels))

    def predict_proba(self, model, features):
        return features[model].reset_index(drop=True)


class FailingTrainer(ClassifierTrainer):
    def fit(self, features, labels):
        raise RuntimeError("trainer exploded")

    def predict_proba(self, model, features):
        raise AssertionError("never reached")


def build_frame(class_sizes, seed=0):
    """ID, Classification, a unique numeric feature, a categorical feature and one indicator column per class."""
    rng = np.random.default_rng(seed)
    labels = [cls for cls, n in class_sizes.items() for _ in range(n)]
    df = pd.DataFrame({
        'ID': [f'id{i}' for i in range(len(labels))],
        'Classification': labels,
        'x': np.arange(len(labels), dtype=float) + rng.random(len(labels)),
        'color': rng.choice(['red', 'green'], size=len(labels)),
    })
    for cls in class_sizes:
        df[cls] = (df['Classification'] == cls).astype(float)
    return df


@pytest.fixture
def make_frame():
    return build_frame


@pytest.fixture
def memorizing_trainer():
    return MemorizingTrainer()


@pytest.fixture
def column_trainer():
    return ColumnTrainer()


@pytest.fixture
def failing_trainer():
    return FailingTrainer()


@pytest.fixture
def three_class_dataset():
    return Dataset(build_frame({'A': 8, 'B': 7, 'C': 5}))
