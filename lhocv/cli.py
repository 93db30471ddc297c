"""
Command-line runner.

Training mode:
    lhocv --input promoter.csv --output-dir results_train --train 1

Prediction mode:
    lhocv --input new.csv --model results_train/rf_model.joblib --output-dir results_predict --train 0

The positional form ``lhocv INPUT MODEL|NA OUTPUT_DIR 1|0`` is accepted too.
"""
import sys
import logging
import argparse
from typing import List, Optional

from lhocv.config import load_config, validate_config
from lhocv.data_loader import Dataset
from lhocv.exceptions import ClassifierError
from lhocv.mode import PREDICT, TRAIN, select_mode
from lhocv.modeling import RandomForestTrainer
from lhocv.outputs import prepare_output_dir, write_prediction_outputs, write_training_outputs
from lhocv.pipeline import ClassificationPipeline, TrainedModel

logger = logging.getLogger(__name__)

POSITIONAL_KEYS = ['input_data', 'model_path', 'output_dir', 'train']


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lhocv',
        description='Random forest training with leave-half-out cross-validation, or prediction with a trained model')
    parser.add_argument('positional', nargs='*', metavar='ARG',
                        help='Optional positional form: INPUT MODEL|NA OUTPUT_DIR 1|0')
    parser.add_argument('--input', dest='input_data', type=str, help='Input CSV (local path or s3:// URI)')
    parser.add_argument('--model', dest='model_path', type=str, help='Trained model file for prediction mode, or NA')
    parser.add_argument('--output-dir', dest='output_dir', type=str, help='Output directory (recreated on each run)')
    parser.add_argument('--train', type=int, choices=[0, 1], help='1 for training mode, 0 for prediction mode')
    parser.add_argument('--config', type=str, help='Path to YAML config file')
    parser.add_argument('--seed', type=int, help='Seed for the validation split and the forest')
    parser.add_argument('--n-estimators', dest='n_estimators', type=int, help='Number of trees')
    parser.add_argument('--n-jobs', dest='n_jobs', type=int, help='Parallel jobs for the forest')
    parser.add_argument('--no-plot', dest='plot_roc', action='store_const', const=False,
                        help='Do not write the ROC curve plot')
    parser.add_argument('--log-level', dest='log_level', type=str, help='Logging level (default INFO)')
    return parser


def parse_config(argv: Optional[List[str]] = None) -> dict:
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if k not in ('positional', 'config')}
    if args.positional:
        if len(args.positional) != len(POSITIONAL_KEYS):
            raise ValueError(f"Positional form needs {len(POSITIONAL_KEYS)} arguments: "
                             f"INPUT MODEL|NA OUTPUT_DIR 1|0, got {args.positional}")
        for key, value in zip(POSITIONAL_KEYS, args.positional):
            if overrides.get(key) is None:
                overrides[key] = value
    config = load_config(args.config, overrides)
    config['train'] = str(config.get('train', 0)).strip().lower() in ('1', 'true', 'yes')
    validate_config(config)
    return config


def run(config: dict) -> Optional[str]:
    """Run one training or prediction job; returns the mode that ran, or None."""
    dataset = Dataset.from_csv(config['input_data'])
    mode = select_mode(config['train'], dataset.labels, config.get('model_path'),
                       min_per_class=int(config['min_per_class']),
                       max_classes=int(config['max_classes']))
    if mode is None:
        return None

    # the output directory is only replaced once results exist
    if mode == TRAIN:
        trainer = RandomForestTrainer(n_estimators=int(config['n_estimators']),
                                      random_state=config.get('seed'),
                                      n_jobs=config.get('n_jobs'))
        pipeline = ClassificationPipeline(trainer=trainer, seed=config.get('seed'))
        trained = pipeline.train(dataset)
        output_dir = prepare_output_dir(config['output_dir'])
        write_training_outputs(trained, dataset, output_dir, plot=bool(config.get('plot_roc', True)))
    elif mode == PREDICT:
        trained = TrainedModel.load(config['model_path'])
        predictions = ClassificationPipeline(trainer=trained.trainer).predict(dataset, trained)
        output_dir = prepare_output_dir(config['output_dir'])
        write_prediction_outputs(predictions, dataset, output_dir)
    return mode


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    try:
        config = parse_config(argv)
    except ValueError as e:
        logger.error(f"Config validation error: {e}")
        return 1
    logging.getLogger().setLevel(str(config.get('log_level', 'INFO')).upper())
    logger.info(f"Config summary: {config}")
    try:
        mode = run(config)
    except ClassifierError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    logger.info(f"Finished. Mode: {mode}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
