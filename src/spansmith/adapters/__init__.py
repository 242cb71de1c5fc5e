"""Adapters connecting the highlighting core to classifiers and documents."""
