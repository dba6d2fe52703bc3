"""
Tests for EnvironmentResolver: backtracking over sibling blocks, nesting
and the structural fallback.
"""

from labelref.parsers.environment_resolver import (
    EnvironmentResolver,
    NullStructureQuery,
    OrgStructureQuery,
)
from labelref.parsers.label_indexer import LabelIndexer


def env_of(text, name, structure_query=None):
    index = LabelIndexer().build_index(text)
    return EnvironmentResolver(structure_query).environment_for_label(name, index)


def test_label_inside_equation(equation_doc):
    env = env_of(equation_doc, "eq1")
    assert env.kind == "equation"
    assert env.source == "text"
    assert env.open_offset == equation_doc.index("\\begin{equation}")
    assert env.close_offset == equation_doc.index("\\end{equation}")


def test_following_sibling_is_not_the_enclosing_block():
    text = (
        "\\begin{align}\n\\label{a1}\nx &= 1\n\\end{align}\n"
        "\\begin{figure}\n\\end{figure}\n"
    )
    assert env_of(text, "a1").kind == "align"


def test_label_between_sibling_blocks_has_no_environment():
    text = (
        "\\begin{figure}\n\\end{figure}\n"
        "\\label{between}\n"
        "\\begin{equation}\ny\n\\end{equation}\n"
    )
    assert env_of(text, "between") is None


def test_closed_inner_block_is_skipped_for_outer_one():
    text = (
        "\\begin{align}\n"
        "\\begin{cases} a \\end{cases}\n"
        "\\label{outer}\n"
        "\\end{align}\n"
    )
    assert env_of(text, "outer").kind == "align"


def test_same_name_nesting_matches_the_right_close():
    text = (
        "\\begin{itemize}\n"
        "\\begin{itemize}\n\\item A\n\\end{itemize}\n"
        "\\label{x}\n"
        "\\end{itemize}\n"
    )
    env = env_of(text, "x")
    assert env.kind == "itemize"
    assert env.open_offset == 0
    assert env.close_offset == text.rindex("\\end{itemize}")


def test_starred_environment_names():
    text = "\\begin{align*}\n\\label{s}\n\\end{align*}\n"
    assert env_of(text, "s").kind == "align*"


def test_org_blocks_are_environments():
    text = "#+BEGIN_SRC python\n# label:code-a\nprint(1)\n#+END_SRC\n"
    assert env_of(text, "code-a").kind == "src"


def test_unclosed_block_does_not_enclose():
    text = "\\begin{equation}\n\\label{x}\n"
    assert env_of(text, "x") is None


def test_no_blocks_at_all():
    assert env_of("<<plain>>\n", "plain") is None


def test_enclosing_environment_by_offset():
    text = "\\begin{proof}\nsome text\n\\end{proof}\n"
    resolver = EnvironmentResolver()
    assert resolver.enclosing_environment(text, text.index("some")).kind == "proof"
    assert resolver.enclosing_environment(text, len(text)) is None


NAMED_EQUATION = """\
#+name: eq2
#+caption: Energy
\\begin{equation}
E = mc^2
\\end{equation}
"""


def test_structure_fallback_for_named_block():
    env = env_of(NAMED_EQUATION, "eq2", OrgStructureQuery())
    assert env.kind == "equation"
    assert env.source == "structure"


def test_null_structure_query_never_answers():
    assert env_of(NAMED_EQUATION, "eq2", NullStructureQuery()) is None
    assert env_of(NAMED_EQUATION, "eq2") is None


def test_structure_query_org_block_and_plain_paragraph():
    query = OrgStructureQuery()
    index = LabelIndexer().build_index(
        "#+name: listing\n#+begin_src sh\nls\n#+end_src\n\n#+name: tbl\n| a |\n"
    )
    assert query.block_kind("listing", index.document) == "src"
    assert query.block_kind("tbl", index.document) is None
    assert query.block_kind("absent", index.document) is None


NAMED_EQUATION_IN_QUOTE = """\
#+begin_quote
#+name: eq2
\\begin{equation}
x
\\end{equation}
#+end_quote
"""


def test_named_block_wins_over_outer_block():
    env = env_of(NAMED_EQUATION_IN_QUOTE, "eq2", OrgStructureQuery())
    assert env.kind == "equation"
    assert env.source == "structure"


def test_named_paragraph_inside_block_uses_text_scan():
    text = "#+begin_quote\n#+name: para\nJust text.\n#+end_quote\n"
    env = env_of(text, "para", OrgStructureQuery())
    assert env.kind == "quote"
    assert env.source == "text"


def test_other_labels_prefer_text_scan():
    text = "#+name: eq3\n\\begin{align}\n\\label{inner}\n\\end{align}\n"
    index = LabelIndexer().build_index(text)
    resolver = EnvironmentResolver(OrgStructureQuery())
    assert resolver.environment_for_label("inner", index).source == "text"
    assert resolver.environment_for_label("eq3", index).source == "structure"
