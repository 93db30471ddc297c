import pytest
import yaml

from lhocv.config import DEFAULT_CONFIG, load_config, validate_config

def test_valid_config():
    config = {
        'input_data': 'datasets/example_train.csv',
        'output_dir': 'results',
        'train': True
    }
    # Should not raise
    validate_config(config)

def test_missing_required_keys():
    config = {
        'input_data': 'datasets/example_train.csv',
        # 'output_dir' missing
    }
    with pytest.raises(ValueError) as excinfo:
        validate_config(config)
    assert 'Missing required config keys' in str(excinfo.value)

@pytest.mark.parametrize("key, value", [('n_estimators', 0), ('min_per_class', 0), ('max_classes', 1)])
def test_invalid_values(key, value):
    config = {'input_data': 'a.csv', 'output_dir': 'out', key: value}
    with pytest.raises(ValueError):
        validate_config(config)

def test_precedence(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump({'input_data': 'file.csv', 'n_estimators': 50, 'seed': 3}))
    config = load_config(str(path), {'n_estimators': 10, 'seed': None, 'output_dir': 'out'})
    assert config['input_data'] == 'file.csv'
    assert config['n_estimators'] == 10
    assert config['seed'] == 3
    assert config['output_dir'] == 'out'
    assert config['min_per_class'] == DEFAULT_CONFIG['min_per_class']

def test_missing_config_file(tmp_path):
    with pytest.raises(ValueError, match="does not exist"):
        load_config(str(tmp_path / 'nope.yaml'))
