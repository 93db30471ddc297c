import numpy as np
import pytest

from lhocv.exceptions import SchemaError
from lhocv.splitter import hold_size, stratified_half_split


def _labels(class_sizes):
    return [cls for cls, n in class_sizes.items() for _ in range(n)]

# --- Completeness and stratification ---
@pytest.mark.parametrize("class_sizes", [
    {'A': 10, 'B': 10},
    {'A': 5, 'B': 7, 'C': 12},
    {'A': 1, 'B': 2, 'C': 3},
    {'x': 9, 'y': 1, 'z': 6, 'w': 11},
])
@pytest.mark.parametrize("seed", [0, 1, 7])
def test_split_is_complete_and_stratified(class_sizes, seed):
    labels = np.array(_labels(class_sizes))
    hold, rest = stratified_half_split(labels, seed=seed)
    combined = np.concatenate([hold, rest])
    assert len(combined) == len(labels)
    assert sorted(combined.tolist()) == list(range(len(labels)))
    for cls, n in class_sizes.items():
        assert (labels[hold] == cls).sum() == max(1, n // 2)

def test_single_member_class_goes_to_hold():
    labels = ['A'] * 6 + ['B']
    hold, rest = stratified_half_split(labels, seed=3)
    assert 6 in hold
    assert 6 not in rest
    assert len(hold) == 4

def test_interleaved_labels():
    labels = ['A', 'B'] * 10
    hold, rest = stratified_half_split(labels, seed=5)
    assert len(hold) == 10
    assert sum(labels[i] == 'A' for i in hold) == 5
    assert np.all(np.diff(rest) > 0)

def test_hold_size():
    assert hold_size(1) == 1
    assert hold_size(2) == 1
    assert hold_size(5) == 2
    assert hold_size(10) == 5

# --- Randomness ---
def test_same_seed_same_split():
    labels = _labels({'A': 20, 'B': 15})
    hold1, rest1 = stratified_half_split(labels, seed=11)
    hold2, rest2 = stratified_half_split(labels, seed=11)
    assert np.array_equal(hold1, hold2)
    assert np.array_equal(rest1, rest2)

def test_explicit_generator_takes_precedence_over_seed():
    labels = _labels({'A': 20, 'B': 15})
    hold1, _ = stratified_half_split(labels, rng=np.random.default_rng(4), seed=99)
    hold2, _ = stratified_half_split(labels, rng=np.random.default_rng(4))
    assert np.array_equal(hold1, hold2)

def test_different_seeds_vary():
    labels = _labels({'A': 40, 'B': 40})
    holds = {tuple(sorted(stratified_half_split(labels, seed=s)[0])) for s in range(5)}
    assert len(holds) > 1

# --- Edge cases ---
def test_missing_labels_rejected():
    with pytest.raises(SchemaError):
        stratified_half_split(['A', None, 'B'], seed=0)

def test_empty_labels():
    hold, rest = stratified_half_split([], seed=0)
    assert len(hold) == 0
    assert len(rest) == 0
