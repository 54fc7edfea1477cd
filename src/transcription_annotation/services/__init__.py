"""
External service clients for the transcription annotation pipeline.

This package contains modules for talking to services outside the annotation core:
- feedback.py: LLM chat-completions client producing coaching feedback text
"""
