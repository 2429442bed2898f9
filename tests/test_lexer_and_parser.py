import pytest
from hypothesis import given, strategies as st

from wat.errors import (
    WatSyntaxError,
    WatUnclosedQuote,
    WatUnclosedParenthesis,
    WatExpectedOpenParen,
)
from wat.reader.lexer import tokenize
from wat.reader.parser import parse, parse_all, parse_atom
from wat.reader.printer import to_source
from wat.types.nil import Nil
from wat.types.symbol import Symbol, Keyword

S = Symbol
K = Keyword


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(add 1 2)", ["(", "add", "1", "2", ")"]),
        ("((x))", ["(", "(", "x", ")", ")"]),
        ("  foo  ", ["foo"]),
        ("", []),
        ('(entity String "hello world")', ["(", "entity", "String", '"hello world"', ")"]),
        ('("a (b) ; c")', ["(", '"a (b) ; c"', ")"]),
        ("(a ; comment (here)\n b)", ["(", "a", "b", ")"]),
        ("(a;c\nb)", ["(", "a", "b", ")"]),
        ("a ; no newline at the end", ["a"]),
        ("(x\t\ny)", ["(", "x", "y", ")"]),
        ('ab"c d"e', ['ab"c d"e']),
    ]
)
def test_tokenize(source, expected):
    assert tokenize(source) == expected


@pytest.mark.parametrize("source", ['"open', '(entity String "abc)', '"a" "b'])
def test_tokenize_unclosed_quote(source):
    with pytest.raises(WatUnclosedQuote):
        tokenize(source)


@pytest.mark.parametrize(
    "token,expected",
    [
        ("true", True),
        ("false", False),
        ("nil", Nil),
        ('"hello"', "hello"),
        ('""', ""),
        ('"a b', "a b"),
        ("42", 42),
        ("-7", -7),
        ("3.25", 3.25),
        ("-0.5", -0.5),
        (":color", K("color")),
        ("foo", S("foo")),
        ("1.", S("1.")),
        (".5", S(".5")),
        ("1e3", S("1e3")),
        ("True", S("True")),
    ]
)
def test_parse_atom(token, expected):
    result = parse_atom(token)
    assert result == expected
    assert type(result) is type(expected)


def test_single_quote_rejected():
    with pytest.raises(WatSyntaxError, match="single quotes not allowed"):
        parse(tokenize("(foo 'a)"))


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(foo 1 2.5)", [S("foo"), 1, 2.5]),
        ("(add 1 2.5)", [S("add"), [S("entity"), S("Integer"), 1], [S("entity"), S("Float"), 2.5]]),
        ("(entity Integer 5)", [S("entity"), S("Integer"), 5]),
        ("(Integer 5)", [S("Integer"), 5]),
        ("(add true x)", [S("add"), True, S("x")]),
        (
            '(entity Noun "dog" :color "brown" :size 3)',
            [S("entity"), S("Noun"), "dog", [S("map"), K("color"), "brown", K("size"), 3]],
        ),
        (
            '(entity Noun "dog" (map :size 3))',
            [S("entity"), S("Noun"), "dog", [S("map"), K("size"), 3]],
        ),
        (
            "(let ((x be 5)) (add x 1))",
            [S("let"), [[S("x"), S("be"), 5]], [S("add"), S("x"), [S("entity"), S("Integer"), 1]]],
        ),
        ("(list 1 (f 2))", [S("list"), [S("entity"), S("Integer"), 1], [S("f"), 2]]),
    ]
)
def test_parse_with_rewrites(source, expected):
    assert parse(tokenize(source)) == expected


def test_parse_reads_first_form_only():
    assert parse(tokenize("(a) (b)")) == [S("a")]


def test_parse_all_reads_every_form():
    assert parse_all(tokenize("(a) ; one\n(b c)")) == [[S("a")], [S("b"), S("c")]]


@pytest.mark.parametrize("source", ["add 1 2", ")", ""])
def test_expected_open_paren(source):
    with pytest.raises(WatExpectedOpenParen):
        parse(tokenize(source))


@pytest.mark.parametrize("source", ["(add 1", "((a)", "(("])
def test_unclosed_parenthesis(source):
    with pytest.raises(WatUnclosedParenthesis, match="unclosed parenthesis"):
        parse(tokenize(source))


def test_stray_close_paren_between_forms():
    with pytest.raises(WatExpectedOpenParen):
        parse_all(tokenize("(a) ) (b)"))


@pytest.mark.parametrize(
    "source",
    [
        '(entity Noun "a (b) c" (map :k "v"))',
        "(let ((f be (lambda ((x as Integer)) returns Integer (add x (entity Integer -1))))) (f 5))",
        "(impl Numeric for Noun)",
        "(foo :k nil true false -3 0.125)",
        "(x ())",
    ]
)
def test_to_source_round_trip(source):
    tree = parse(tokenize(source))
    assert to_source(tree) == source
    assert parse(tokenize(to_source(tree))) == tree


def test_to_source_normalises_whitespace_and_comments():
    tree = parse(tokenize("(  add   ; sum\n  x   y )"))
    assert to_source(tree) == "(add x y)"


def test_to_source_float_without_exponent():
    assert to_source([S("f"), 1e16, 1.5e-7]) == "(f 10000000000000000.0 0.00000015)"


# ---------------- Property: print/parse round trip ----------------

_names = st.from_regex(r"[a-z][a-z0-9\-]{0,8}", fullmatch=True).filter(
    lambda s: s not in ("true", "false", "nil")
)
_atoms = st.one_of(
    _names.map(Symbol),
    _names.map(Keyword),
    st.integers(min_value=-10**12, max_value=10**12),
    st.floats(min_value=-1e9, max_value=1e9, allow_nan=False, allow_infinity=False),
    st.booleans(),
    st.just(Nil),
    st.text(alphabet=st.characters(blacklist_characters='"', blacklist_categories=("Cs",)), max_size=12),
)
_forms = st.recursive(
    st.lists(_atoms, max_size=5),
    lambda children: st.lists(st.one_of(_atoms, children), max_size=5),
    max_leaves=25,
)


@given(_forms)
def test_print_parse_round_trip(form):
    # One pass through the parser applies the rewrites; after that the
    # tree must survive printing and re-parsing unchanged.
    tree = parse(tokenize(to_source(form)))
    assert parse(tokenize(to_source(tree))) == tree


@pytest.mark.parametrize("token", ['"abc"def', '"a""b"', 'ab"c"', 'a"b c"'])
def test_quote_inside_atom_rejected(token):
    with pytest.raises(WatSyntaxError, match="misplaced quote"):
        parse(tokenize(f"(f {token})"))


def test_deeply_nested_text_is_a_syntax_error():
    source = "(" * 5000 + ")" * 5000
    with pytest.raises(WatSyntaxError, match="nested too deeply"):
        parse_all(tokenize(source))


@given(st.text(alphabet='ab "();\n', max_size=24))
def test_parsed_text_prints_back_to_the_same_tree(text):
    # Arbitrary text either fails to parse or yields trees that print to
    # source the reader accepts again.
    try:
        forms = parse_all(tokenize(text))
    except WatSyntaxError:
        return
    for form in forms:
        assert parse(tokenize(to_source(form))) == form
