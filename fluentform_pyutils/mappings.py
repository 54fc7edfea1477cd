from types import MappingProxyType
from typing import Final

PhonemeStr = str
GraphemeStr = str

# Lower-case ARPAbet-style symbols to the spellings they commonly take in English text.
# Keys overlap (several vowels claim "a"); iteration order is part of the contract.
PHONEME_TO_GRAPHEMES: Final[MappingProxyType[PhonemeStr, tuple[GraphemeStr, ...]]] = (
    MappingProxyType(
        {
            # Vowels
            "iy": ("i", "y", "ee", "ea", "e"),
            "ih": ("i", "y", "e"),
            "eh": ("e", "ea", "a"),
            "ae": ("a", "ai"),
            "ah": ("u", "o", "a"),
            "uw": ("oo", "u", "o"),
            "uh": ("oo", "u", "o"),
            "ao": ("o", "au", "aw", "a"),
            "aa": ("a", "o"),
            "ey": ("a", "ay", "ai", "ei"),
            "ay": ("i", "y", "ie"),
            "oy": ("oi", "oy"),
            "ow": ("o", "ow"),
            "aw": ("ow", "ou", "au"),
            "ax": ("a", "e", "i", "o", "u"),  # schwa
            # Consonants
            "p": ("p",),
            "b": ("b",),
            "t": ("t",),
            "d": ("d",),
            "k": ("k", "c", "ck", "ch"),
            "g": ("g",),
            "ch": ("ch", "tch"),
            "jh": ("j", "g", "dge"),
            "f": ("f", "ph", "gh"),
            "v": ("v",),
            "th": ("th",),
            "dh": ("th",),
            "s": ("s", "c", "ce", "ss"),
            "z": ("z", "s", "ss"),
            "sh": ("sh", "ti", "ci"),
            "zh": ("s", "si"),
            "hh": ("h",),
            "m": ("m", "mm"),
            "n": ("n", "nn", "kn"),
            "ng": ("ng",),
            "l": ("l", "ll"),
            "r": ("r", "rr", "wr"),
            "y": ("y", "i"),
            "w": ("w", "wh"),
            "dx": ("t", "tt", "dd"),  # flap
            "er": ("er", "ir", "ur", "or", "ar"),
        }
    )
)
