"""taxcompare — Old vs New regime income-tax estimator."""

__version__ = "0.1.0"
