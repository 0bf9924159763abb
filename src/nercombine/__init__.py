"""Named-entity annotation by combining a cascade of classifiers."""

__version__ = "0.1.0"
