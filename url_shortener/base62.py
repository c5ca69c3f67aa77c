"""
Base62 codec for short keys.

Converts the integer identifiers assigned by storage into compact keys and
back. The alphabet order is part of the public contract: changing it would
make every previously issued short key unresolvable.
"""

# a-z -> 0-25, A-Z -> 26-51, 0-9 -> 52-61
ALPHABET = (
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789"
)
BASE = len(ALPHABET)

CHAR_TO_VALUE = {char: value for value, char in enumerate(ALPHABET)}


class Base62Error(ValueError):
    """Base class for codec errors"""


class EmptyInputError(Base62Error):
    """Raised when decoding an empty key"""

    def __init__(self):
        super().__init__("Cannot decode an empty key")


class InvalidCharacterError(Base62Error):
    """Raised when a key contains a character outside the alphabet"""

    def __init__(self, char, position):
        self.char = char
        self.position = position
        super().__init__(f"Invalid base62 character {char!r} at position {position}")


class NegativeInputError(Base62Error):
    """Raised when encoding a negative identifier"""

    def __init__(self, num):
        self.num = num
        super().__init__(f"Cannot encode negative number: {num}")


def encode(num: int) -> str:
    """
    Encode a non-negative integer to a Base62 string

    Args:
        num (int): The identifier to encode

    Returns:
        str: Base62 key, most significant digit first

    Raises:
        TypeError: If num is not an integer
        NegativeInputError: If num is negative
    """
    if isinstance(num, bool) or not isinstance(num, int):
        raise TypeError(f"Expected an integer, got {type(num).__name__}")
    if num < 0:
        raise NegativeInputError(num)

    if num == 0:
        return ALPHABET[0]

    digits = []
    while num > 0:
        num, remainder = divmod(num, BASE)
        digits.append(ALPHABET[remainder])

    return "".join(reversed(digits))


def decode(key: str) -> int:
    """
    Decode a Base62 string to a number

    Args:
        key (str): The Base62 key to decode

    Returns:
        int: Decoded identifier

    Raises:
        EmptyInputError: If key is empty
        InvalidCharacterError: If key contains a character outside the alphabet
    """
    if not key:
        raise EmptyInputError()

    # Integer arithmetic only; floats lose precision above 2**53
    num = 0
    length = len(key)
    for position, char in enumerate(key):
        value = CHAR_TO_VALUE.get(char)
        if value is None:
            raise InvalidCharacterError(char, position)
        num += value * BASE ** (length - 1 - position)

    return num
