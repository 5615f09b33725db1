# tests/conftest.py
"""
Shared KDL sample documents for the test suite.
"""

import pytest

EMPTY_KDL = ""

SERVER_KDL = "server port=8080 { tls enabled=true }"

NESTED_KDL = """\
// application settings
(config)app "demo" version=3 {
    database host="localhost" port=5432 timeout=1.5
    cache enabled=false ttl=null
    users {
        user "alice" admin=true
        user "bob"
    }
}
"""

COMMENTS_KDL = """\
/* block comment /* nested */ still comment */
first 1 // trailing
/-skipped "gone"
second /-1 2 /-key=3 \\
    other=4
third /-{ child }
"""

STRINGS_KDL = r'''
plain "a\tb\n\"quoted\" \\ \/ \u{1F600}"
raw r"C:\path\file"
hashed r#"say "hi""#
'''

NUMBERS_KDL = """\
numbers 0 -17 +42 1_000 0x1F 0o17 0b1010 -0xff 1.5 -2.25e3 6E-1
"""

SEMICOLONS_KDL = "a; b 1; c key=2"


@pytest.fixture
def kdl_file(tmp_path):
    """Write a KDL document to a temporary file and return its path."""
    def _write(text: str, name: str = "doc.kdl"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
