"""
    Type tags: the suffix after the last ':' in a member name.

    tag       := primitive | array | set
    primitive := 'b' | 'i' | 'f' | 's' | 'd' | 't' | 'O'
    array     := 'A' '<' tag '>'
    set       := 'S' '<' tag '>'

    `parse_tag` turns the suffix into a descriptor, and `descriptor.tag`
    turns it back into text. There is exactly one spelling per descriptor.
"""
from tjsonlib.errors import TagSyntaxError

MAX_TAG_DEPTH = 32


class Primitive:
    __slots__ = ('letter', 'name')

    def __init__(self, letter, name):
        self.letter = letter
        self.name = name

    @property
    def tag(self):
        return self.letter

    def __eq__(self, other):
        return isinstance(other, Primitive) and other.letter == self.letter

    def __hash__(self):
        return hash(self.letter)

    def __repr__(self):
        return self.name.upper()


class Generic:
    __slots__ = ('inner',)
    letter = None

    def __init__(self, inner):
        if not isinstance(inner, (Primitive, Generic)):
            raise TypeError('{} needs a type descriptor, not {!r}'.format(self.__class__.__name__, inner))
        self.inner = inner

    @property
    def tag(self):
        return "{}<{}>".format(self.letter, self.inner.tag)

    def __eq__(self, other):
        return other.__class__ is self.__class__ and other.inner == self.inner

    def __hash__(self):
        return hash((self.letter, self.inner))

    def __repr__(self):
        return "{}({!r})".format(self.__class__.__name__, self.inner)

class ArrayType(Generic):
    __slots__ = ()
    letter = 'A'

class SetType(Generic):
    __slots__ = ()
    letter = 'S'


BOOLEAN = Primitive('b', 'boolean')
INTEGER = Primitive('i', 'integer')
FLOAT = Primitive('f', 'float')
STRING = Primitive('s', 'string')
BINARY = Primitive('d', 'binary')
TIMESTAMP = Primitive('t', 'timestamp')
OBJECT = Primitive('O', 'object')

primitives = {p.letter: p for p in (BOOLEAN, INTEGER, FLOAT, STRING, BINARY, TIMESTAMP, OBJECT)}
generics = {'A': ArrayType, 'S': SetType}


def parse_tag(tag, max_depth=MAX_TAG_DEPTH):
    """
        Parse a tag suffix into a descriptor.

        Generics only ever nest on the left, so the parse is a run of
        'A<'/'S<' openers, one primitive, then the same number of '>'.
    """
    if not isinstance(tag, str):
        raise TypeError('tag must be a string, not {!r}'.format(tag))
    if not tag:
        raise TagSyntaxError(tag, 0, "Empty tag")

    openers = []
    pos = 0
    end = len(tag)

    while True:
        if pos == end:
            raise TagSyntaxError(tag, pos, "Unterminated '<'")
        c = tag[pos]
        if c in generics:
            if tag[pos + 1:pos + 2] != '<':
                raise TagSyntaxError(tag, pos + 1, "Expected '<' after {!r}".format(c))
            openers.append(generics[c])
            if len(openers) > max_depth:
                raise TagSyntaxError(tag, pos, "Tag too deeply nested (limit is {})".format(max_depth))
            pos += 2
        elif c in primitives:
            desc = primitives[c]
            pos += 1
            break
        else:
            raise TagSyntaxError(tag, pos, "Unknown tag {!r}".format(c))

    while openers:
        if pos == end:
            raise TagSyntaxError(tag, pos, "Unterminated '<'")
        if tag[pos] != '>':
            raise TagSyntaxError(tag, pos, "Expected '>' but found {!r}".format(tag[pos]))
        desc = openers.pop()(desc)
        pos += 1

    if pos != end:
        raise TagSyntaxError(tag, pos, "Trailing content: {!r}".format(tag[pos:pos + 10]))

    return desc


def split_member_name(key, max_depth=MAX_TAG_DEPTH):
    """ "a:b:A<i>" -> ("a:b", ArrayType(INTEGER)) """
    name, sep, tag = key.rpartition(':')
    if not sep:
        raise TagSyntaxError(key, len(key), "Missing tag (no ':' in member name)")
    return name, parse_tag(tag, max_depth)


def member_name(name, desc):
    return "{}:{}".format(name, desc.tag)
