"""
    hooray for exceptions
"""
import json
import re

_identifier = re.compile(r"(?!\d)\w+\Z")

def format_path(path):
    """ ('items', 2, 'count') -> '$.items[2].count' """
    out = ['$']
    for segment in path:
        if isinstance(segment, int):
            out.append('[{}]'.format(segment))
        elif _identifier.match(segment):
            out.append('.{}'.format(segment))
        else:
            out.append('[{}]'.format(json.dumps(segment, ensure_ascii=False)))
    return ''.join(out)


def json_type_name(raw):
    if raw is None:
        return 'null'
    if raw is True or raw is False:
        return 'boolean'
    if isinstance(raw, (int, float)):
        return 'number'
    if isinstance(raw, str):
        return 'string'
    if isinstance(raw, list):
        return 'array'
    if isinstance(raw, dict):
        return 'object'
    return type(raw).__name__


class TJSONError(Exception): pass

# Malformed member-name suffix

class TagSyntaxError(TJSONError):
    def __init__(self, tag, pos, reason, path=()):
        self.tag = tag
        self.pos = pos
        self.reason = reason
        self.path = tuple(path)
        Exception.__init__(self, reason)

    def __str__(self):
        msg = "{} in tag {!r} (at pos={})".format(self.reason, self.tag, self.pos)
        if self.path:
            msg = "{}: {}".format(format_path(self.path), msg)
        return msg

# Well-formed JSON that is not valid TJSON
# always carries the member path it was found at

class ValidationError(TJSONError):
    def __init__(self, reason, path=(), expected=None, got=None):
        self.reason = reason
        self.path = tuple(path)
        self.expected = expected
        self.got = got
        Exception.__init__(self, reason)

    def __str__(self):
        msg = "{}: {}".format(format_path(self.path), self.reason)
        if self.expected is not None and self.got is not None:
            msg = "{} (expected {}, got {})".format(msg, self.expected.tag, self.got)
        elif self.expected is not None:
            msg = "{} (expected {})".format(msg, self.expected.tag)
        return msg

class DuplicateMemberError(ValidationError): pass
class TypeMismatchError(ValidationError): pass
class FormatError(ValidationError): pass
class SetOrderError(ValidationError): pass
class RootShapeError(ValidationError): pass

# The json layer could not make a tree out of the text

class UnderlyingJsonError(TJSONError):
    def __init__(self, reason, lineno=None, colno=None):
        self.reason = reason
        self.lineno = lineno
        self.colno = colno
        Exception.__init__(self, reason)

    def __str__(self):
        return "malformed JSON: {}".format(self.reason)
