"""
    Check a raw json tree against a type descriptor, and build typed values.

    The raw tree is what the json module hands back: dict, list, str,
    int, float, bool and None. It is only read, never modified.

    Parsing is strict: sets must already be in canonical order, and
    integers in canonical form. Nothing is re-sorted or coerced here.
"""
import base64
import binascii

from tjsonlib.errors import (TagSyntaxError, DuplicateMemberError, TypeMismatchError,
        FormatError, SetOrderError, ValidationError, json_type_name)
from tjsonlib.tags import (BOOLEAN, INTEGER, FLOAT, STRING, BINARY, TIMESTAMP, OBJECT,
        ArrayType, SetType, MAX_TAG_DEPTH, split_member_name)
from tjsonlib.values import (Boolean, Integer, Float, String, Binary, Timestamp, Object, Array, Set,
        MAX_NESTING)
from tjsonlib.canonical import sort_key


def validate(desc, raw, path=(), max_depth=MAX_TAG_DEPTH):
    path = tuple(path)
    if len(path) > MAX_NESTING:
        raise FormatError("Document too deeply nested (limit is {})".format(MAX_NESTING),
                path=path, expected=desc, got=json_type_name(raw))
    try:
        validator = validators[desc]
    except KeyError:
        if isinstance(desc, SetType):
            return validate_set(desc, raw, path, max_depth)
        elif isinstance(desc, ArrayType):
            return validate_array(desc, raw, path, max_depth)
        raise TypeError("not a type descriptor: {!r}".format(desc))
    return validator(raw, path, max_depth)


def mismatch(desc, raw, path, wanted):
    return TypeMismatchError("Expected a JSON {}".format(wanted), path=path,
            expected=desc, got=json_type_name(raw))


def construct(desc, cls, raw, path, *args):
    """ Run a value constructor, putting the path on anything it rejects """
    try:
        return cls(raw, *args)
    except ValidationError as e:
        raise e.__class__(e.reason, path=path, expected=desc, got=json_type_name(raw)) from None


def validate_boolean(raw, path, max_depth):
    if raw is not True and raw is not False:
        raise mismatch(BOOLEAN, raw, path, 'boolean')
    return Boolean(raw)


def validate_integer(raw, path, max_depth):
    if not isinstance(raw, str):
        raise mismatch(INTEGER, raw, path, 'string')
    return construct(INTEGER, Integer, raw, path)


def validate_float(raw, path, max_depth):
    if raw is True or raw is False or not isinstance(raw, (int, float)):
        raise mismatch(FLOAT, raw, path, 'number')
    return construct(FLOAT, Float, raw, path)


def validate_string(raw, path, max_depth):
    if not isinstance(raw, str):
        raise mismatch(STRING, raw, path, 'string')
    return construct(STRING, String, raw, path)


def validate_binary(raw, path, max_depth):
    if not isinstance(raw, str):
        raise mismatch(BINARY, raw, path, 'string')
    try:
        out = base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError("Invalid base64: {}".format(e), path=path, expected=BINARY, got='string') from e
    return Binary(out)


def validate_timestamp(raw, path, max_depth):
    if not isinstance(raw, str):
        raise mismatch(TIMESTAMP, raw, path, 'string')
    try:
        return Timestamp.parse(raw)
    except ValidationError as e:
        raise e.__class__(e.reason, path=path, expected=TIMESTAMP, got='string') from None


def validate_object(raw, path, max_depth):
    if not isinstance(raw, dict):
        raise mismatch(OBJECT, raw, path, 'object')
    out = Object()
    for key, item in raw.items():
        try:
            name, desc = split_member_name(key, max_depth)
        except TagSyntaxError as e:
            e.path = path + (key,)
            raise
        if name in out:
            raise DuplicateMemberError("Duplicate member name {!r}".format(name),
                    path=path + (name,), expected=desc, got=json_type_name(item))
        out[name] = validate(desc, item, path + (name,), max_depth)
    return out


def validate_items(desc, raw, path, max_depth):
    if not isinstance(raw, list):
        raise mismatch(desc, raw, path, 'array')
    return [validate(desc.inner, item, path + (n,), max_depth) for n, item in enumerate(raw)]


def validate_array(desc, raw, path, max_depth):
    return Array(desc.inner, validate_items(desc, raw, path, max_depth))


def validate_set(desc, raw, path, max_depth):
    items = validate_items(desc, raw, path, max_depth)
    keys = [sort_key(item) for item in items]
    for n in range(1, len(items)):
        if keys[n - 1] == keys[n]:
            raise SetOrderError("Duplicate item in set", path=path + (n,),
                    expected=desc.inner, got=json_type_name(raw[n]))
        if keys[n - 1] > keys[n]:
            raise SetOrderError("Set items not in canonical order", path=path + (n,),
                    expected=desc.inner, got=json_type_name(raw[n]))
    return Set(desc.inner, items)


validators = {
    BOOLEAN: validate_boolean,
    INTEGER: validate_integer,
    FLOAT: validate_float,
    STRING: validate_string,
    BINARY: validate_binary,
    TIMESTAMP: validate_timestamp,
    OBJECT: validate_object,
}
