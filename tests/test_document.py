# tests/test_document.py
"""
Tests for the immutable document tree.
"""

import dataclasses

import pytest

from kdlcore import parse_document
from kdlcore.document import KdlDocument, KdlNode, KdlValue, ValueKind


class TestKdlValue:

    def test_constructors(self):
        assert KdlValue.string("a").kind is ValueKind.STRING
        assert KdlValue.integer(1).kind is ValueKind.INT
        assert KdlValue.float_(1.0).kind is ValueKind.FLOAT
        assert KdlValue.boolean(True).kind is ValueKind.BOOLEAN
        assert KdlValue.null().value is None

    @pytest.mark.parametrize("kind,value", [
        (ValueKind.INT, True),
        (ValueKind.INT, 1.0),
        (ValueKind.FLOAT, 1),
        (ValueKind.STRING, None),
        (ValueKind.BOOLEAN, 0),
    ])
    def test_rejects_wrong_python_type(self, kind, value):
        with pytest.raises(ValueError):
            KdlValue(kind, value)

    def test_frozen(self):
        value = KdlValue.integer(1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            value.value = 2

    def test_with_type(self):
        assert KdlValue.integer(1).with_type("u8") == KdlValue.integer(1, ty="u8")

    def test_to_dict(self):
        assert KdlValue.string("x").to_dict() == "x"
        assert KdlValue.null(ty="t").to_dict() == {"type": "t", "value": None}


class TestKdlNode:

    def test_properties_are_read_only(self):
        node = KdlNode("n", properties={"a": KdlValue.integer(1)})
        with pytest.raises(TypeError):
            node.properties["b"] = KdlValue.integer(2)

    def test_sequences_are_tuples(self):
        node = KdlNode("n", [KdlValue.integer(1)], children=[KdlNode("c")])
        assert isinstance(node.values, tuple)
        assert isinstance(node.children, tuple)

    def test_indexing_and_get(self):
        node = KdlNode("n", [KdlValue.integer(1)], {"k": KdlValue.boolean(True)})
        assert node[0] == KdlValue.integer(1)
        assert node.get("k") == KdlValue.boolean(True)
        assert node.get("missing") is None

    def test_no_children_differs_from_empty_block(self):
        assert KdlNode("n") != KdlNode("n", children=[])

    def test_hashable(self):
        a = KdlNode("n", [KdlValue.integer(1)], {"x": KdlValue.integer(1),
                                                 "y": KdlValue.null()})
        b = KdlNode("n", [KdlValue.integer(1)], {"y": KdlValue.null(),
                                                 "x": KdlValue.integer(1)})
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1


class TestKdlDocument:

    def test_get_returns_first_match(self):
        doc = KdlDocument([KdlNode("a", [KdlValue.integer(1)]),
                           KdlNode("a", [KdlValue.integer(2)])])
        assert doc.get("a").values == (KdlValue.integer(1),)
        assert doc.get("b") is None

    def test_parsed_document_is_hashable(self):
        doc = parse_document("a 1 k=2 { b }")
        assert hash(doc) == hash(parse_document("a 1 k=2 {\n    b\n}"))

    def test_iteration_and_len(self):
        doc = KdlDocument([KdlNode("a"), KdlNode("b")])
        assert [n.name for n in doc] == ["a", "b"]
        assert len(doc) == 2
