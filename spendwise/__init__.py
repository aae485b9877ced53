"""Spendwise - a personal income and expense tracker."""

__version__ = "0.1.0"
