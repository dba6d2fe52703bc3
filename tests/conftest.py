"""
Shared pytest fixtures for the labelref test suite.

Documents are plain strings; file-based checks write them under tmp_path.
"""

import pytest

from labelref.pipeline import ReferenceCheckPipeline
from labelref.utils.config import Config


EQUATION_DOC = """\
* Results
Energy is conserved:
\\begin{equation}
\\label{eq1}
E = mc^2
\\end{equation}
\\begin{figure}
\\includegraphics{plot.png}
\\end{figure}
As shown in eqref:eq1.
"""

MIXED_DOC = """\
* Introduction
  :PROPERTIES:
  :CUSTOM_ID: sec-intro
  :END:
Text with a <<first target>> and label:lbl-link in it.

#+name: fig1
#+caption: A figure
[[file:figure.png]]

\\lstset{language=Python,label=code1,caption=Listing}

See ref:fig1, [[cref:sec-intro,lbl-link]] and [[ref:missing][missing]].
Range [[crefrange:fig1]] is incomplete.
"""


@pytest.fixture
def pipeline():
    """Pipeline with default configuration and no console output."""
    return ReferenceCheckPipeline(config=Config.from_dict({}), console=False)


@pytest.fixture
def equation_doc():
    return EQUATION_DOC


@pytest.fixture
def mixed_doc():
    return MIXED_DOC


@pytest.fixture
def org_tree(tmp_path):
    """Directory of Org files: one clean, one with a broken reference."""
    (tmp_path / "clean.org").write_text(
        "#+name: tbl1\n| a | b |\n\nSee ref:tbl1.\n", encoding="utf-8"
    )
    sub = tmp_path / "chapters"
    sub.mkdir()
    (sub / "broken.org").write_text(
        "<<sec1>>\nSee cref:sec1,sec2 here.\n", encoding="utf-8"
    )
    (tmp_path / "notes.txt").write_text("ref:ignored\n", encoding="utf-8")
    return tmp_path
