"""
    Documents: TJSON text in, TJSON text out.

    The json module does the lexing and writing, the rest of tjsonlib does
    everything between the raw tree and the typed values.
"""
import json
import logging

from tjsonlib.errors import (TJSONError, UnderlyingJsonError, DuplicateMemberError, RootShapeError,
        FormatError, json_type_name)
from tjsonlib.tags import OBJECT, MAX_TAG_DEPTH, parse_tag
from tjsonlib.values import Object
from tjsonlib import canonical, validator

CONTENT_TYPE = "application/tjson"

_LOG = logging.getLogger(__name__)


def _members(pairs):
    out = {}
    for key, value in pairs:
        if key in out:
            raise DuplicateMemberError("Duplicate member name {!r}".format(key))
        out[key] = value
    return out


def _no_constants(name):
    raise ValueError("{} is not valid JSON".format(name))


class Document:
    """ A parsed TJSON document: a root Object """

    def __init__(self, root):
        if not isinstance(root, Object):
            got = root.type.tag if hasattr(root, 'type') else type(root).__name__
            raise RootShapeError("Document root must be an object", expected=OBJECT, got=got)
        self.root = root

    def __getitem__(self, name):
        return self.root[name]

    def __contains__(self, name):
        return name in self.root

    def __iter__(self):
        return iter(self.root)

    def __len__(self):
        return len(self.root)

    def get(self, name, default=None):
        return self.root.get(name, default)

    def items(self):
        return self.root.items()

    def pointer(self, pointer):
        return self.root.pointer(pointer)

    def to_python(self):
        return self.root.to_python()

    def __eq__(self, other):
        if isinstance(other, Document):
            return self.root == other.root
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return "Document({!r})".format(self.root)


class Codec:
    content_type = CONTENT_TYPE

    def __init__(self, max_depth=MAX_TAG_DEPTH, indent=None):
        self.max_depth = max_depth
        self.indent = indent

    def parse_tag(self, tag):
        return parse_tag(tag, self.max_depth)

    def validate(self, desc, raw):
        return validator.validate(desc, raw, max_depth=self.max_depth)

    def serialize(self, value):
        return canonical.serialize(value)

    def load_raw(self, text):
        try:
            return json.loads(text, object_pairs_hook=_members, parse_constant=_no_constants)
        except TJSONError:
            raise
        except json.JSONDecodeError as e:
            raise UnderlyingJsonError(e.msg, e.lineno, e.colno) from e
        except (ValueError, RecursionError) as e:
            raise UnderlyingJsonError(str(e) or e.__class__.__name__) from e

    def parse(self, text):
        raw = self.load_raw(text)
        try:
            if not isinstance(raw, dict):
                raise RootShapeError("Document root must be an object", expected=OBJECT, got=json_type_name(raw))
            root = validator.validate(OBJECT, raw, max_depth=self.max_depth)
        except TJSONError as e:
            _LOG.debug("Rejected document: %s", e)
            raise
        _LOG.debug("Parsed document with %d members", len(root))
        return Document(root)

    def dump(self, doc):
        if not isinstance(doc, Document):
            doc = Document(doc)
        try:
            raw = canonical.serialize(doc.root)
            _LOG.debug("Writing document with %d members", len(raw))
            return json.dumps(raw, ensure_ascii=False, allow_nan=False, indent=self.indent)
        except RecursionError:
            # set elements are keyed from their own root, so chained sets escape MAX_NESTING
            raise FormatError("Document too deeply nested", expected=OBJECT) from None
