#!/usr/bin/env python3
r"""
# TJSON: Tagged JSON

TJSON is JSON, where every member name carries a type tag after its last ':'

```
{
  "array-example:A<O>": [
    {
      "string-example:s": "foobar",
      "binary-example:d": "QklOQVJZ",
      "float-example:f": 0.42,
      "int-example:i": "42",
      "timestamp-example:t": "2016-11-06T22:27:34Z",
      "boolean-example:b": true
    }
  ],
  "set-example:S<i>": ["1", "2", "3"]
}
```

## Tags

 - `b` boolean: `true` or `false`
 - `i` integer: a string of decimal digits, any size, no leading zeros, no '+'
 - `f` float: a JSON number, always finite
 - `s` string: unicode, no surrogate pairs
 - `d` binary: standard base64 with padding
 - `t` timestamp: RFC 3339 in UTC, (i.e 'Zulu time'), `"2017-11-22T23:32:07.100497Z"`
 - `O` object: members must have unique names once the tags are removed
 - `A<x>` array: every item has type x
 - `S<x>` set: every item has type x, no duplicate items, in canonical order

There is no null: `null` is rejected everywhere. The root of a document
must be an object.

## Canonical form

 - Member names are written from the type, members in insertion order
 - Integers as digit strings, binary as padded standard base64
 - Sets sorted: false < true, numbers numerically, strings and binary
   by bytes, timestamps by time, anything else by its compact json bytes
   (with member names sorted)

Parsing is strict: a set out of order, or with a duplicate, is an error.
Sets built in code are sorted when written out.

## Usage

```
doc = tjson.parse_document(text)
doc['count'].value                  # 42
doc.pointer('/items/0/name')

obj = tjson.from_python(tjson.OBJECT, {"count:i": 42, "ids:S<i>": [3, 1, 2]})
tjson.write_document(obj)           # '{"count:i": "42", "ids:S<i>": ["1", "2", "3"]}'
```
"""
from tjsonlib.errors import (TJSONError, TagSyntaxError, ValidationError, DuplicateMemberError,
        TypeMismatchError, FormatError, SetOrderError, RootShapeError, UnderlyingJsonError)
from tjsonlib.tags import (BOOLEAN, INTEGER, FLOAT, STRING, BINARY, TIMESTAMP, OBJECT,
        ArrayType, SetType, MAX_TAG_DEPTH, split_member_name)
from tjsonlib.values import (Value, Boolean, Integer, Float, String, Binary, Timestamp,
        Object, Array, Set, from_python)
from tjsonlib.canonical import sort_key, canonical_bytes
from tjsonlib.codec import Codec, Document, CONTENT_TYPE

codec = Codec()

parse_tag = codec.parse_tag
validate = codec.validate
serialize = codec.serialize

parse_document = parse = codec.parse
write_document = dump = codec.dump
