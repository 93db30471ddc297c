from unittest import mock

import numpy as np
import pandas as pd
import pytest

from lhocv.data_loader import DataLoader, Dataset, TableSchema
from lhocv.exceptions import SchemaError

# --- Schema ---
def test_positional_schema():
    schema = TableSchema.positional(['seq', 'cls', 'gc', 'len'])
    assert schema.id_column == 'seq'
    assert schema.label_column == 'cls'
    assert schema.feature_columns == ('gc', 'len')

def test_positional_schema_needs_a_feature():
    with pytest.raises(SchemaError):
        TableSchema.positional(['seq', 'cls'])

def test_explicit_schema_any_column_order():
    df = pd.DataFrame({'f': [1.0, 2.0], 'label': ['a', 'b'], 'key': ['k1', 'k2']})
    dataset = Dataset(df, TableSchema('key', 'label', ('f',)))
    assert dataset.ids.tolist() == ['k1', 'k2']
    assert list(dataset.features.columns) == ['f']

@pytest.mark.parametrize("df, message", [
    (pd.DataFrame({'ID': [1, 1], 'C': ['a', 'b'], 'f': [0, 1]}), "Duplicate identifiers"),
    (pd.DataFrame({'ID': [1, np.nan], 'C': ['a', 'b'], 'f': [0, 1]}), "missing values"),
    (pd.DataFrame({'ID': [], 'C': [], 'f': []}), "empty"),
])
def test_invalid_tables(df, message):
    with pytest.raises(SchemaError, match=message):
        Dataset(df)

def test_missing_declared_column():
    df = pd.DataFrame({'ID': [1], 'C': ['a'], 'f': [0]})
    with pytest.raises(SchemaError, match="Missing columns"):
        Dataset(df, TableSchema('ID', 'C', ('f', 'g')))

# --- Dataset accessors ---
def test_labels_and_classes_are_strings():
    df = pd.DataFrame({'ID': [10, 11, 12, 13], 'C': [2, 1, 2, np.nan], 'f': [0.1, 0.2, 0.3, 0.4]})
    dataset = Dataset(df)
    assert dataset.ids.tolist() == ['10', '11', '12', '13']
    assert dataset.classes == ['1.0', '2.0']
    assert dataset.has_missing_labels()
    assert pd.isnull(dataset.labels.iloc[3])

def test_subset_keeps_order_and_schema():
    df = pd.DataFrame({'ID': ['a', 'b', 'c'], 'C': ['x', 'y', 'x'], 'f': [1, 2, 3]})
    dataset = Dataset(df)
    sub = dataset.subset([2, 0])
    assert sub.ids.tolist() == ['c', 'a']
    assert sub.schema == dataset.schema
    assert len(sub) == 2

def test_input_frame_not_modified():
    df = pd.DataFrame({0: ['a'], 1: ['x'], 2: [1.0]})
    Dataset(df)
    assert list(df.columns) == [0, 1, 2]

# --- Loading ---
def test_load_local_csv(tmp_path):
    path = tmp_path / 'data.csv'
    pd.DataFrame({'ID': ['a', 'b'], 'C': ['x', 'y'], 'f': [1, 2]}).to_csv(path, index=False)
    dataset = Dataset.from_csv(str(path))
    assert len(dataset) == 2
    assert dataset.schema.feature_columns == ('f',)

def test_load_from_s3(tmp_path):
    def fake_download(bucket, key, local_path):
        assert (bucket, key) == ('my-bucket', 'data/train.csv')
        pd.DataFrame({'ID': ['a'], 'C': ['x'], 'f': [1]}).to_csv(local_path, index=False)

    client = mock.Mock()
    client.download_file.side_effect = fake_download
    with mock.patch('lhocv.data_loader.boto3.client', return_value=client):
        df = DataLoader('s3://my-bucket/data/train.csv', download_dir=str(tmp_path)).load()
    assert df.shape == (1, 3)
    assert (tmp_path / 'train.csv').exists()
