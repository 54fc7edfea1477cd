"""
Text alignment functionality for the transcription annotation pipeline.

This package contains modules for turning assessment results into per-character annotations:
- recognition_payload.py: Assessment payload reshaping into flat phoneme scores
- grapheme_alignment.py: Phoneme-to-letter alignment of the displayed text
"""
