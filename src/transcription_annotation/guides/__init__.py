"""
Static phoneme reference data for the practice views.

- phoneme_guide.py: Pronunciation instructions, example words and practice tips
- articulation.py: Mouth poses driving the articulation visualization
"""
