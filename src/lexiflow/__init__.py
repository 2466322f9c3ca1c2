"""lexiflow: adaptive spaced-repetition scheduling for vocabulary learning."""

from lexiflow.consts import VERSION

__version__ = VERSION
