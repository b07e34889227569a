"""
    Canonical ordering and the canonical serializer.

    `serialize` turns a typed value into the plain tree the json module
    writes out, regenerating every member tag from its descriptor and
    putting every set into canonical order.

    `sort_key` gives the canonical order within a set:

    - booleans: false < true
    - integers: numeric, compared on their digits
    - floats: IEEE 754 total order, so -0.0 < 0.0
    - strings: utf-8 bytes, binary: the bytes
    - timestamps: chronological
    - objects, arrays, sets: the canonical bytes of the element

    Two set elements with equal keys are duplicates.
"""
import base64
import json
import math
from operator import itemgetter

from tjsonlib.errors import SetOrderError, TypeMismatchError, FormatError
from tjsonlib.tags import member_name
from tjsonlib.values import (Boolean, Integer, Float, String, Binary, Timestamp, Object, Array, Set,
        MAX_NESTING)

# 0 -> 9, 1 -> 8, ...: bigger negative magnitudes sort first
_invert_digits = str.maketrans("0123456789", "9876543210")


def integer_key(digits):
    if digits.startswith('-'):
        magnitude = digits[1:]
        return (0, -len(magnitude), magnitude.translate(_invert_digits))
    return (1, len(digits), digits)


def float_key(value):
    return (value, math.copysign(1.0, value))


def sort_key(value):
    if isinstance(value, Boolean):
        return value.value
    elif isinstance(value, Integer):
        return integer_key(value.digits)
    elif isinstance(value, Float):
        return float_key(value.value)
    elif isinstance(value, String):
        return value.value.encode('utf-8')
    elif isinstance(value, Binary):
        return value.value
    elif isinstance(value, Timestamp):
        return value.instant()
    elif isinstance(value, (Object, Array)):
        return canonical_bytes(value)
    raise TypeError('not a typed value: {!r}'.format(value))


def canonical_bytes(value):
    """ Compact json, member names sorted, utf-8 """
    raw = serialize(value)
    return json.dumps(raw, ensure_ascii=False, allow_nan=False,
            sort_keys=True, separators=(',', ':')).encode('utf-8')


def sort_set(value, path=()):
    """ Items of a Set in canonical order, rejecting duplicates """
    keyed = sorted(((sort_key(item), n, item) for n, item in enumerate(value.items)), key=itemgetter(0))
    for prev, cur in zip(keyed, keyed[1:]):
        if prev[0] == cur[0]:
            raise SetOrderError("Duplicate item in set: {!r} (items {} and {})".format(
                cur[2], prev[1], cur[1]), path=path, expected=value.type)
    return [item for _, _, item in keyed]


def serialize(value, path=()):
    if len(path) > MAX_NESTING:
        raise FormatError("Document too deeply nested (limit is {})".format(MAX_NESTING),
                path=path, expected=getattr(value, "type", None))
    if isinstance(value, (Boolean, Float, String)):
        return value.value
    elif isinstance(value, Integer):
        return value.digits
    elif isinstance(value, Binary):
        return base64.standard_b64encode(value.value).decode('ascii')
    elif isinstance(value, Timestamp):
        return value.format()
    elif isinstance(value, Object):
        out = {}
        for name, item in value.items():
            out[member_name(name, item.type)] = serialize(item, path + (name,))
        return out
    elif isinstance(value, Array):
        # items is a plain list, so check what was appended to it
        for n, item in enumerate(value.items):
            if not isinstance(item, typed) or item.type != value.inner:
                raise TypeMismatchError("Item {!r} does not match the element type".format(item),
                        path=path + (n,), expected=value.inner)
        if isinstance(value, Set):
            items = sort_set(value, path)
        else:
            items = value.items
        return [serialize(item, path + (n,)) for n, item in enumerate(items)]
    raise TypeError('not a typed value: {!r}'.format(value))


typed = (Boolean, Integer, Float, String, Binary, Timestamp, Object, Array)
