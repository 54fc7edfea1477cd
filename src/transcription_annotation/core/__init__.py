"""
Core processing logic for the transcription annotation pipeline.

This package contains modules for running a full analysis of one attempt:
- processor.py: Assessment analysis producing the annotated report
"""
