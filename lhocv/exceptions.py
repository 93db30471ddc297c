"""
Custom exceptions for the random-forest classifier with leave-half-out validation.
"""

class ClassifierError(Exception):
    """Base class for all errors raised by this package."""
    pass

class SchemaError(ClassifierError):
    """Raised when an input table does not match the expected layout."""
    pass

class DegenerateClassError(ClassifierError):
    """Raised when a class has no positive or no negative examples to rank."""
    pass

class InsufficientSampleError(ClassifierError):
    """Raised when a dataset is too small or has the wrong number of classes for training."""
    pass

class TrainerFailure(ClassifierError):
    """Raised by a classifier trainer when it cannot fit a model."""
    pass

class ModelLoadError(ClassifierError):
    """Raised when a persisted model file cannot be read back."""
    pass
