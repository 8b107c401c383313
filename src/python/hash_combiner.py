# Copyright (c) 2002-2009, Hirondelle Systems
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# Redistributions of source code must retain the above copyright
# notice, this list of conditions and the following disclaimer.
# Redistributions in binary form must reproduce the above copyright
# notice, this list of conditions and the following disclaimer in the
# documentation and/or other materials provided with the distribution.
# Neither the name of Hirondelle Systems nor the
# names of its contributors may be used to endorse or promote products
# derived from this software without specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY HIRONDELLE SYSTEMS ''AS IS'' AND ANY
# EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
# DISCLAIMED. IN NO EVENT SHALL HIRONDELLE SYSTEMS BE LIABLE FOR ANY
# DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES
# (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES;
# LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND
# ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT
# (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS
# SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""
Hash-code combiner for composing ``__hash__`` values field by field.

Copyright (c) 2002-2009, Hirondelle Systems (see notice above)
Python port copyright (c) 2025 John Byrd

SPDX-License-Identifier: BSD-3-Clause

Typical use::

    def __hash__(self):
        result = SEED
        result = combine(result, self.name)
        result = combine(result, self.count)
        result = combine(result, self.samples)
        return result

Every fold multiplies the accumulator by an odd prime and adds the
contribution of the next field, wrapping to a signed 32-bit integer.
"""
import array
import logging
import math
import struct
from typing import Any, FrozenSet

logger = logging.getLogger(__name__)

SEED = 23

_ODD_PRIME = 37

_FLOAT_NAN_BITS = 0x7fc00000
_DOUBLE_NAN_BITS = 0x7ff8000000000000

_INT32_MIN = -0x80000000
_INT32_MAX = 0x7FFFFFFF

ARRAY_TYPES = (list, tuple, array.array, bytes, bytearray, memoryview)


def _to_int32(value: int) -> int:
    """Wrap an arbitrary int to the signed 32-bit range."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _first_term(seed: int) -> int:
    return _ODD_PRIME * seed


def hash_boolean(seed: int, value: bool) -> int:
    """Fold a boolean: 1 for true, 0 for false."""
    logger.debug("boolean...")
    return _to_int32(_first_term(seed) + (1 if value else 0))


def hash_char(seed: int, value: str) -> int:
    """Fold a single character by its code point."""
    logger.debug("char...")
    return _to_int32(_first_term(seed) + ord(value))


def hash_int(seed: int, value: int) -> int:
    """Fold a 32-bit integer. Wider values wrap first."""
    logger.debug("int...")
    return _to_int32(_first_term(seed) + value)


def hash_long(seed: int, value: int) -> int:
    """Fold a 64-bit integer as the XOR of its low and high halves."""
    logger.debug("long...")
    value &= 0xFFFFFFFFFFFFFFFF
    return _to_int32(_first_term(seed) + ((value ^ (value >> 32)) & 0xFFFFFFFF))


def float_to_int_bits(value: float) -> int:
    """IEEE-754 single-precision bit pattern of ``value`` as a signed int."""
    if math.isnan(value):
        return _FLOAT_NAN_BITS
    try:
        packed = struct.pack('>f', value)
    except OverflowError:
        packed = struct.pack('>f', math.copysign(math.inf, value))
    return struct.unpack('>i', packed)[0]


def double_to_long_bits(value: float) -> int:
    """IEEE-754 double-precision bit pattern of ``value`` as a signed int."""
    if math.isnan(value):
        return _DOUBLE_NAN_BITS
    return struct.unpack('>q', struct.pack('>d', value))[0]


def hash_float(seed: int, value: float) -> int:
    """Fold a value as a 32-bit float, by bit pattern."""
    return hash_int(seed, float_to_int_bits(value))


def hash_double(seed: int, value: float) -> int:
    """Fold a value as a 64-bit float, by bit pattern."""
    return hash_long(seed, double_to_long_bits(value))


def hash_object(seed: int, value: Any) -> int:
    """
    Fold a possibly-None reference, which may be an array.

    A non-array contributes its own ``hash()``. Array elements are folded
    in index order through ``combine``, so each one picks the rule for its
    runtime type; an element that is the array itself is skipped.
    An ``array.array`` folds its elements by typecode instead, so ``'f'``
    elements take the float rule and 8-byte integers the long rule.
    """
    return _hash_reference(seed, value, frozenset())


def _hash_reference(seed: int, value: Any, enclosing: FrozenSet[int]) -> int:
    if value is None:
        return hash_int(seed, 0)
    if not isinstance(value, ARRAY_TYPES):
        return hash_int(seed, hash(value))

    logger.debug("array of %d...", len(value))
    result = _to_int32(seed)
    if isinstance(value, array.array):
        rule = _typed_array_rule(value)
        for item in value:
            result = rule(result, item)
        return result

    enclosing = enclosing | {id(value)}
    for item in value:
        # a slot holding the array (or an array around it) would never terminate
        if id(item) in enclosing:
            continue
        result = _combine(result, item, enclosing)
    return result


def _typed_array_rule(value: array.array):
    """Pick the element rule from an ``array.array`` typecode."""
    if value.typecode == 'f':
        return hash_float
    if value.typecode == 'd':
        return hash_double
    if value.typecode in ('u', 'w'):
        return hash_char
    return hash_int if value.itemsize <= 4 else hash_long


def _combine(seed: int, value: Any, enclosing: FrozenSet[int]) -> int:
    if isinstance(value, bool):
        return hash_boolean(seed, value)
    if isinstance(value, int):
        if _INT32_MIN <= value <= _INT32_MAX:
            return hash_int(seed, value)
        return hash_long(seed, value)
    if isinstance(value, float):
        return hash_double(seed, value)
    if isinstance(value, str) and len(value) == 1:
        return hash_char(seed, value)
    return _hash_reference(seed, value, enclosing)


def combine(seed: int, value: Any) -> int:
    """Fold ``value`` into ``seed`` using the rule for its runtime type."""
    return _combine(seed, value, frozenset())


def hash_fields(*values: Any, seed: int = SEED) -> int:
    """Fold every value in order, starting from ``seed``."""
    result = seed
    for value in values:
        result = combine(result, value)
    return result


class HashCodeBuilder:
    """Accumulator wrapper for building a hash one field at a time."""

    def __init__(self, seed: int = SEED):
        self._value = _to_int32(seed)

    def add(self, value: Any) -> 'HashCodeBuilder':
        self._value = combine(self._value, value)
        return self

    def add_boolean(self, value: bool) -> 'HashCodeBuilder':
        self._value = hash_boolean(self._value, value)
        return self

    def add_char(self, value: str) -> 'HashCodeBuilder':
        self._value = hash_char(self._value, value)
        return self

    def add_int(self, value: int) -> 'HashCodeBuilder':
        self._value = hash_int(self._value, value)
        return self

    def add_long(self, value: int) -> 'HashCodeBuilder':
        self._value = hash_long(self._value, value)
        return self

    def add_float(self, value: float) -> 'HashCodeBuilder':
        self._value = hash_float(self._value, value)
        return self

    def add_double(self, value: float) -> 'HashCodeBuilder':
        self._value = hash_double(self._value, value)
        return self

    def add_object(self, value: Any) -> 'HashCodeBuilder':
        self._value = hash_object(self._value, value)
        return self

    @property
    def value(self) -> int:
        """Current accumulator."""
        return self._value

    def __int__(self) -> int:
        return self._value

