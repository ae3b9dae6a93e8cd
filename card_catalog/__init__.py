"""Effective-dated versioning and rotating-category scheduling for a credit card catalog."""

__version__ = "1.0.0"
