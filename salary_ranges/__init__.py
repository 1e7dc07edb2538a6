"""Salary range benchmarks from market survey percentiles and internal pay."""

__version__ = "3.2.0"
