"""BlinkVocab spaced-repetition vocabulary service."""

__version__ = "0.1.0"
