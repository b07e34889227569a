"""
    The typed value model.

    Every value knows its own type descriptor, so an Object member is just
    a bare name and a value: the member tag is `value.type.tag`.

    Values are built by the validator when parsing, or by applications,
    either directly (`Integer(5)`, `Array(STRING, ["a", "b"])`) or from
    plain python data with `from_python`.
"""
import math
import re
from datetime import datetime, timezone
from decimal import Decimal

from tjsonlib.errors import TypeMismatchError, FormatError, DuplicateMemberError
from tjsonlib.tags import (BOOLEAN, INTEGER, FLOAT, STRING, BINARY, TIMESTAMP, OBJECT,
        ArrayType, SetType, split_member_name)

int_b10 = re.compile(r"-?(?:0|[1-9][0-9]*)\Z")
index_b10 = re.compile(r"(?:0|[1-9][0-9]*)\Z")
fraction_b10 = re.compile(r"[0-9]*\Z")

rfc3339_utc = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]+))?(Z|[+-][0-9]{2}:[0-9]{2})\Z")

surrogates = re.compile(r"[\uD800-\uDFFF]")

# members and elements below a document root
MAX_NESTING = 128


def parse_index(s):
    if not index_b10.match(s):
        return None
    return int(Decimal(s))


class Value:
    __slots__ = ()
    type = None

    @property
    def tag(self):
        return self.type.tag

    def __eq__(self, other):
        from tjsonlib.canonical import sort_key
        if not isinstance(other, Value) or other.type != self.type:
            return False
        return sort_key(self) == sort_key(other)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        from tjsonlib.canonical import sort_key
        return hash((self.type, sort_key(self)))

    def __repr__(self):
        return "{}({!r})".format(self.__class__.__name__, self.value)

    def to_python(self):
        return self.value

    # accessors: None on a variant mismatch

    def is_boolean(self): return isinstance(self, Boolean)
    def is_integer(self): return isinstance(self, Integer)
    def is_float(self): return isinstance(self, Float)
    def is_string(self): return isinstance(self, String)
    def is_binary(self): return isinstance(self, Binary)
    def is_timestamp(self): return isinstance(self, Timestamp)
    def is_object(self): return isinstance(self, Object)
    def is_array(self): return isinstance(self, Array)
    def is_set(self): return isinstance(self, Set)

    def as_bool(self): return self.value if self.is_boolean() else None
    def as_int(self): return self.value if self.is_integer() else None
    def as_float(self): return self.value if self.is_float() else None
    def as_str(self): return self.value if self.is_string() else None
    def as_bytes(self): return self.value if self.is_binary() else None
    def as_datetime(self): return self.value if self.is_timestamp() else None
    def as_object(self): return self if self.is_object() else None
    def as_array(self): return self.items if self.is_array() else None
    def as_set(self): return self.items if self.is_set() else None

    def pointer(self, pointer):
        """
            RFC 6901 lookup, using bare member names and element indexes.

            `doc.pointer("/items/0/name")`, None if there is nothing there.
        """
        if pointer == "":
            return self
        if not pointer.startswith('/'):
            return None
        target = self
        for token in pointer.split('/')[1:]:
            token = token.replace("~1", "/").replace("~0", "~")
            if isinstance(target, Object):
                target = target.get(token)
            elif isinstance(target, Array):
                # set indexes follow the written order
                items = target.sorted() if isinstance(target, Set) else target.items
                idx = parse_index(token)
                if idx is None or idx >= len(items):
                    return None
                target = items[idx]
            else:
                return None
            if target is None:
                return None
        return target


class Boolean(Value):
    __slots__ = ('value',)
    type = BOOLEAN

    def __init__(self, value):
        if value is not True and value is not False:
            raise TypeMismatchError("Boolean needs True or False, not {!r}".format(value), expected=BOOLEAN)
        self.value = value


class Integer(Value):
    """ Arbitrary precision, kept as its canonical decimal digits. """
    __slots__ = ('digits',)
    type = INTEGER

    def __init__(self, value):
        if isinstance(value, bool):
            raise TypeMismatchError("Integer needs an int, not {!r}".format(value), expected=INTEGER)
        if isinstance(value, int):
            # Decimal converts without the int/str digit limit
            self.digits = str(Decimal(value))
        elif isinstance(value, str):
            if not int_b10.match(value) or value == '-0':
                raise FormatError("Non-canonical integer: {!r}".format(value), expected=INTEGER)
            self.digits = value
        else:
            raise TypeMismatchError("Integer needs an int or digit string, not {!r}".format(value), expected=INTEGER)

    @property
    def value(self):
        return int(Decimal(self.digits))

    @property
    def negative(self):
        return self.digits.startswith('-')

    def __repr__(self):
        return "Integer({!r})".format(self.digits)


class Float(Value):
    __slots__ = ('value',)
    type = FLOAT

    def __init__(self, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeMismatchError("Float needs a number, not {!r}".format(value), expected=FLOAT)
        try:
            value = float(value)
        except OverflowError:
            raise FormatError("Number out of range for a float", expected=FLOAT) from None
        if not math.isfinite(value):
            raise FormatError("Float must be finite, not {!r}".format(value), expected=FLOAT)
        self.value = value


class String(Value):
    __slots__ = ('value',)
    type = STRING

    def __init__(self, value):
        if not isinstance(value, str):
            raise TypeMismatchError("String needs a str, not {!r}".format(value), expected=STRING)
        if surrogates.search(value):
            raise FormatError("String cannot have surrogate pairs", expected=STRING)
        self.value = value


class Binary(Value):
    __slots__ = ('value',)
    type = BINARY

    def __init__(self, value):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeMismatchError("Binary needs bytes, not {!r}".format(value), expected=BINARY)
        self.value = bytes(value)


class Timestamp(Value):
    """
        A UTC instant.

        `value` is a datetime (microsecond resolution), `fraction` keeps the
        sub-second digits exactly as written, so "...:07.123456789Z" comes
        back out unchanged.
    """
    __slots__ = ('value', 'fraction')
    type = TIMESTAMP

    def __init__(self, value, fraction=None):
        if not isinstance(value, datetime):
            raise TypeMismatchError("Timestamp needs a datetime, not {!r}".format(value), expected=TIMESTAMP)
        if value.tzinfo is None or value.utcoffset() is None:
            raise FormatError("Timestamp needs a timezone-aware datetime", expected=TIMESTAMP)
        value = value.astimezone(timezone.utc)
        if fraction is None:
            fraction = "{:06d}".format(value.microsecond).rstrip('0')
        elif not isinstance(fraction, str) or not fraction_b10.match(fraction):
            raise FormatError("Invalid fraction of a second: {!r}".format(fraction), expected=TIMESTAMP)
        else:
            value = value.replace(microsecond=int(fraction[:6].ljust(6, '0')))
        self.value = value
        self.fraction = fraction

    @classmethod
    def parse(cls, text):
        m = rfc3339_utc.match(text)
        if not m:
            raise FormatError("Invalid RFC 3339 timestamp: {!r}".format(text), expected=TIMESTAMP)
        if m.group(8) != 'Z':
            raise FormatError("Timestamp must be UTC ('Z'), not {!r}".format(m.group(8)), expected=TIMESTAMP)
        fields = [int(x) for x in m.group(1, 2, 3, 4, 5, 6)]
        try:
            value = datetime(*fields, tzinfo=timezone.utc)
        except ValueError as e:
            raise FormatError("Invalid timestamp {!r}: {}".format(text, e), expected=TIMESTAMP) from e
        return cls(value, m.group(7) or "")

    def format(self):
        v = self.value
        out = "{:04d}-{:02d}-{:02d}T{:02d}:{:02d}:{:02d}".format(
                v.year, v.month, v.day, v.hour, v.minute, v.second)
        if self.fraction:
            out = "{}.{}".format(out, self.fraction)
        return out + "Z"

    def instant(self):
        """ (whole seconds, exact fraction): chronological ordering """
        return (self.value.replace(microsecond=0), Decimal("0.{}".format(self.fraction or "0")))

    def __repr__(self):
        return "Timestamp({!r})".format(self.format())


class Object(Value):
    """ Ordered bare name -> Value """
    __slots__ = ('members',)
    type = OBJECT
    __hash__ = None

    def __init__(self, members=()):
        self.members = {}
        if hasattr(members, 'items'):
            members = members.items()
        for name, value in members:
            self[name] = value

    def __setitem__(self, name, value):
        if not isinstance(name, str):
            raise TypeError("member names must be strings, not {!r}".format(name))
        if not isinstance(value, Value):
            raise TypeMismatchError("member {!r} must be a typed value, not {!r}".format(name, value))
        self.members[name] = value

    def add(self, name, value):
        if name in self.members:
            raise DuplicateMemberError("Duplicate member name {!r}".format(name))
        self[name] = value

    def __getitem__(self, name):
        return self.members[name]

    def __delitem__(self, name):
        del self.members[name]

    def __contains__(self, name):
        return name in self.members

    def __iter__(self):
        return iter(self.members)

    def __len__(self):
        return len(self.members)

    def get(self, name, default=None):
        return self.members.get(name, default)

    def items(self):
        return self.members.items()

    @property
    def value(self):
        return self.members

    def to_python(self):
        return {k: v.to_python() for k, v in self.members.items()}

    def __repr__(self):
        return "Object({})".format(", ".join(
            "{}={!r}".format(k, v) for k, v in self.members.items()))


class Array(Value):
    __slots__ = ('type', 'items')
    __hash__ = None
    container = ArrayType

    def __init__(self, inner, items=()):
        if isinstance(items, (str, bytes, Value)) or not hasattr(items, '__iter__'):
            raise TypeMismatchError("{} needs a sequence of items, not {!r}".format(
                self.__class__.__name__, items), expected=self.container(inner))
        self.type = self.container(inner)
        self.items = [from_python(inner, item) for item in items]

    @property
    def inner(self):
        return self.type.inner

    @property
    def value(self):
        return self.items

    def __getitem__(self, idx):
        return self.items[idx]

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def append(self, item):
        self.items.append(from_python(self.inner, item))

    def to_python(self):
        return [x.to_python() for x in self.items]

    def __repr__(self):
        return "{}({!r}, {!r})".format(self.__class__.__name__, self.inner, self.items)


class Set(Array):
    """
        Elements are kept in the order given, and put in canonical order
        when serialized. Parsed sets are already in canonical order.
    """
    __slots__ = ()
    container = SetType

    def add(self, item):
        self.append(item)

    def sorted(self):
        from tjsonlib.canonical import sort_key
        return sorted(self.items, key=sort_key)

    def to_python(self):
        return [x.to_python() for x in self.sorted()]


constructors = {
    BOOLEAN: Boolean,
    INTEGER: Integer,
    FLOAT: Float,
    STRING: String,
    BINARY: Binary,
    TIMESTAMP: Timestamp,
}


def from_python(desc, obj):
    """
        Build a typed value of type `desc` from plain python data.

        from_python(ArrayType(INTEGER), [1, 2, 3])
        from_python(OBJECT, {"name:s": "x", "ids:S<i>": [3, 1]})

    """
    if isinstance(obj, Value):
        if obj.type != desc:
            raise TypeMismatchError("Expected a {} value, not {!r}".format(desc.tag, obj), expected=desc)
        return obj
    if desc in constructors:
        return constructors[desc](obj)
    if desc == OBJECT:
        if not hasattr(obj, 'items'):
            raise TypeMismatchError("Object needs a mapping, not {!r}".format(obj), expected=OBJECT)
        out = Object()
        for key, value in obj.items():
            name, member_type = split_member_name(key)
            out.add(name, from_python(member_type, value))
        return out
    if isinstance(desc, SetType):
        return Set(desc.inner, obj)
    if isinstance(desc, ArrayType):
        return Array(desc.inner, obj)
    raise TypeError("not a type descriptor: {!r}".format(desc))
