"""Short code generation utility

This module turns a URL into a fixed-length printable short code and back.

A URL is fingerprinted with CityHash32; the 4 big-endian fingerprint bytes are
packed with the standard base64 alphabet and no padding, which gives exactly 6 symbols.
32 bits only fill 30 + 2 bits of the 6 six-bit groups, so the low 4 bits of the last
symbol are always zero. Those 4 bits are reused to carry the collision ordinal
(0-15) of URLs sharing the same fingerprint.

Functions:
    fingerprint(original_url) -> int:
        32-bit non-cryptographic hash of the URL's UTF-8 bytes.
    encode(original_url) -> str:
        Canonical 6-symbol short code for a URL.
    with_sequence(short_code, sequence) -> str:
        Embed a collision ordinal into the low 4 bits of the last symbol.
    decode(presented_code) -> tuple[str, int]:
        Split a presented code into (canonical code, collision ordinal).
    partition_of(short_code) -> Partition:
        Storage partition selected by the first symbol of a code.

Example:
    >>> from shorturl.utils.shortener import encode, with_sequence, decode
    >>> code = encode('https://example.com/a')
    >>> code
    'bvK70A'
    >>> decode(with_sequence(code, 3)) == (code, 3)
    True

NOTE:
    - Uniqueness is NOT provided by the hash. Distinct URLs with the same fingerprint
      are told apart by their collision ordinal (see shorturl.service.create).
    - The alphabet order and bit packing are the standard base64 ones and must never
      change, otherwise previously issued codes stop resolving.
"""

import base64
import string

from cityhash import CityHash32

from shorturl.constants import Fingerprint
from shorturl.exceptions import ParameterError
from shorturl.models import Partition


ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + '+/'
_POSITIONS = {symbol: position for position, symbol in enumerate(ALPHABET)}


def fingerprint(original_url: str) -> int:
    """Compute the 32-bit fingerprint of a URL (CityHash32 of its UTF-8 bytes).

    Raises:
        ParameterError:
            If the URL holds characters UTF-8 cannot encode (lone surrogates).
    """
    try:
        data = original_url.encode('utf-8')
    except UnicodeEncodeError as e:
        raise ParameterError('Original URL must be valid Unicode text.') from e
    return CityHash32(data)


def encode(original_url: str) -> str:
    """Encode a URL into its canonical 6-symbol short code.

    Args:
        original_url (str):
            Non-empty URL to fingerprint.

    Returns:
        str: 6 symbols over ALPHABET. The low 4 bits of the last symbol are zero.

    Raises:
        TypeError:
            If original_url is not a string.
        ParameterError:
            If original_url is empty or not encodable as UTF-8.

    Example:
        >>> len(encode('https://example.com/a'))
        6
    """
    if not isinstance(original_url, str):
        raise TypeError(f'Original URL must be of type string (given type: {type(original_url)}).')
    if not original_url:
        raise ParameterError('Original URL must be a non-empty string.')

    digest = fingerprint(original_url).to_bytes(Fingerprint.BITS // 8, 'big')
    return base64.b64encode(digest).decode('ascii').rstrip('=')


def _last_symbol_position(code: str) -> int:
    if not isinstance(code, str):
        raise TypeError(f'Short code must be of type string (given type: {type(code)}).')
    if not code:
        raise ParameterError('Short code must be a non-empty string.')
    try:
        return _POSITIONS[code[-1]]
    except KeyError as e:
        raise ParameterError(f'Short code {code!r} ends with a symbol outside the short code alphabet.') from e


def with_sequence(short_code: str, sequence: int) -> str:
    """Write a collision ordinal into the low 4 bits of the code's last symbol.

    Ordinal 0 leaves a canonical code unchanged.

    Raises:
        ValueError:
            If sequence is outside 0-15.
        ParameterError:
            If short_code is empty or ends with a symbol outside ALPHABET.
    """
    if not 0 <= sequence < Fingerprint.MAX_COLLISIONS:
        raise ValueError(f'Sequence must be within 0-{Fingerprint.MAX_COLLISIONS - 1} (given value: {sequence}).')

    position = _last_symbol_position(short_code)
    return short_code[:-1] + ALPHABET[(position & Fingerprint.VARIANT_MASK) | sequence]


def decode(presented_code: str) -> tuple[str, int]:
    """Split a presented code into its canonical code and collision ordinal

    Steps:
        - Find the alphabet position of the last symbol.
        - The low 4 bits are the collision ordinal.
        - The high 2 bits are fingerprint bits; the canonical code keeps only those.

    Args:
        presented_code (str):
            Code as handed out to (and presented by) a client.

    Returns:
        tuple[str, int]: (canonical short code, collision ordinal)

    Raises:
        ParameterError:
            If presented_code is empty or its last symbol is outside ALPHABET.

    Example:
        >>> decode('Ab3xQx')
        ('Ab3xQw', 1)
    """
    position = _last_symbol_position(presented_code)
    sequence = position & Fingerprint.SEQUENCE_MASK
    variant = position & Fingerprint.VARIANT_MASK
    return presented_code[:-1] + ALPHABET[variant], sequence


def partition_of(short_code: str) -> Partition:
    """Select the storage partition of a code from its first symbol only."""
    if not short_code:
        raise ParameterError('Short code must be a non-empty string.')

    first = short_code[0]
    if first in string.ascii_uppercase:
        return Partition.UPPER
    elif first in string.ascii_lowercase:
        return Partition.LOWER
    else:
        return Partition.DIGIT
