"""
Display rules for the transcription annotation pipeline.

This package contains the pure scoring rules consumed by the rendering layer:
- score_classes.py: Score bucketing into display classes and performance feedback tiers
"""
