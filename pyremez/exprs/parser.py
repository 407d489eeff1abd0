r"""@package pyremez.exprs.parser

Recursive descent parser turning formula text into a nodes tree.

The grammar, from lowest to highest precedence, is:

    expr    := term (('+' | '-') term)*
    term    := unary (('*' | '/') unary)*
    unary   := ('-' | '+') unary | power
    power   := primary ('^' unary)?
    primary := number | 'x' | constant | name '(' args ')' | '(' expr ')'
    args    := expr (',' expr)*

Exponentiation is right-associative and binds tighter than unary minus, so
that ``-2^2`` is `-4` and ``2^-1`` is `0.5`. The operator ``**`` may be used
instead of ``^``.

Unknown names and calls with the wrong number of arguments are rejected
while parsing, i.e. before any numeric work is done.
"""

import re

from ..real import Real
from .nodes import Constant, Variable, UnaryOp, BinaryOp, Call
from .nodes import FUNCTIONS, CONSTANTS


__all__ = [
    "ParseError",
    "parse",
    "tokenize",
]


class ParseError(ValueError):
    r"""Raised for malformed expression text.

    The `position` attribute holds the 0-based offset of the offending
    character in the parsed text and `message` a description of the
    problem.
    """
    def __init__(self, position, message, text=None):
        super(ParseError, self).__init__(position, message)
        ## Offset of the offending character.
        self.position = position
        ## Human readable description.
        self.message = message
        ## The text being parsed (may be `None`).
        self.text = text

    def __str__(self):
        msg = "%s at position %d" % (self.message, self.position)
        if self.text is not None:
            msg += "\n  %s\n  %s^" % (self.text, " " * self.position)
        return msg


_NUMBER = re.compile(r"(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_NAME = re.compile(r"[A-Za-z_][A-Za-z_0-9]*")

NUM = 'num'
NAME = 'name'
OP = 'op'
END = 'end'


class Token(object):
    r"""A lexical token with its kind, text and position."""
    __slots__ = ("kind", "text", "pos")

    def __init__(self, kind, text, pos):
        self.kind = kind
        self.text = text
        self.pos = pos

    def __repr__(self):
        return "Token(%r, %r, %d)" % (self.kind, self.text, self.pos)


def tokenize(text):
    r"""Split `text` into a list of tokens terminated by an `END` token."""
    tokens = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c.isspace():
            i += 1
            continue
        m = _NUMBER.match(text, i)
        if m:
            tokens.append(Token(NUM, m.group(0), i))
            i = m.end()
            continue
        m = _NAME.match(text, i)
        if m:
            tokens.append(Token(NAME, m.group(0), i))
            i = m.end()
            continue
        if text.startswith("**", i):
            tokens.append(Token(OP, '^', i))
            i += 2
            continue
        if c in "+-*/^(),":
            tokens.append(Token(OP, c, i))
            i += 1
            continue
        raise ParseError(i, "unexpected character %r" % c, text)
    tokens.append(Token(END, "", n))
    return tokens


class _Parser(object):
    r"""Single-use parser state for one text."""

    def __init__(self, text):
        self.text = text
        self.tokens = tokenize(text)
        self.i = 0

    @property
    def tok(self):
        return self.tokens[self.i]

    def error(self, msg, tok=None):
        tok = self.tok if tok is None else tok
        return ParseError(tok.pos, msg, self.text)

    def advance(self):
        tok = self.tokens[self.i]
        self.i += 1
        return tok

    def accept(self, op):
        if self.tok.kind == OP and self.tok.text == op:
            return self.advance()
        return None

    def expect(self, op):
        tok = self.accept(op)
        if tok is None:
            raise self.error("expected '%s'%s" % (op, self._found()))
        return tok

    def _found(self):
        if self.tok.kind == END:
            return " but reached end of input"
        return " but found '%s'" % self.tok.text

    def parse(self):
        if self.tok.kind == END:
            raise self.error("empty expression")
        node = self.expr()
        if self.tok.kind != END:
            raise self.error("unexpected '%s'" % self.tok.text)
        return node

    def expr(self):
        node = self.term()
        while True:
            tok = self.accept('+') or self.accept('-')
            if tok is None:
                return node
            node = BinaryOp(tok.text, node, self.term())

    def term(self):
        node = self.unary()
        while True:
            tok = self.accept('*') or self.accept('/')
            if tok is None:
                return node
            node = BinaryOp(tok.text, node, self.unary())

    def unary(self):
        tok = self.accept('-') or self.accept('+')
        if tok is not None:
            return UnaryOp(tok.text, self.unary())
        return self.power()

    def power(self):
        node = self.primary()
        if self.accept('^'):
            node = BinaryOp('^', node, self.unary())
        return node

    def primary(self):
        tok = self.tok
        if tok.kind == NUM:
            self.advance()
            return Constant(Real(tok.text))
        if tok.kind == NAME:
            self.advance()
            return self.name(tok)
        if self.accept('('):
            node = self.expr()
            self.expect(')')
            return node
        if tok.kind == END:
            raise self.error("unexpected end of input")
        raise self.error("unexpected '%s'" % tok.text)

    def name(self, tok):
        name = tok.text
        if self.accept('('):
            if name not in FUNCTIONS:
                raise self.error("unknown function '%s'" % name, tok)
            args = []
            if not self.accept(')'):
                args.append(self.expr())
                while self.accept(','):
                    args.append(self.expr())
                self.expect(')')
            arity = FUNCTIONS[name][0]
            if len(args) != arity:
                raise self.error(
                    "%s() takes %d argument%s, got %d"
                    % (name, arity, "" if arity == 1 else "s", len(args)),
                    tok
                )
            return Call(name, args)
        if name == 'x':
            return Variable()
        if name in CONSTANTS:
            return Constant(CONSTANTS[name]())
        if name in FUNCTIONS:
            raise self.error("function '%s' requires arguments" % name, tok)
        raise self.error("unknown identifier '%s'" % name, tok)


def parse(text):
    r"""Parse formula text into the root node of an expression tree.

    @b Raises

    ParseError for any malformed input. No partial tree is ever returned.
    """
    if not isinstance(text, str):
        raise TypeError("expression text must be a string")
    try:
        return _Parser(text).parse()
    except RecursionError:
        raise ParseError(0, "expression nested too deeply", text) from None
