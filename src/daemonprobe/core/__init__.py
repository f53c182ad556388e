"""Evaluation core: deadline, lifecycle and severity reduction."""
