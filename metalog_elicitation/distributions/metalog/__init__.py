"""Metalog quantile-function family."""
