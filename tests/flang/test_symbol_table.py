"""Tests for the analyzer's symbol table and the runtime environment."""

import pytest

from flang.flang_ast import FLangASTAtom
from flang.flang_environment import FLangEnvironment
from flang.flang_error import FLangEvalError
from flang.flang_symbol_table import FLangSymbolTable, FLangType
from flang.flang_value import FLangInteger


class TestSymbolTable:
    """Test FLangSymbolTable scope frames."""

    def test_define_and_lookup(self):
        """Test recording a variable type."""
        table = FLangSymbolTable()
        table.define_variable("x", FLangType.NUMBER)
        assert table.lookup_variable_type("x") == FLangType.NUMBER
        assert table.is_variable_defined("x")
        assert not table.is_variable_defined("y")

    def test_default_type_is_any(self):
        """Test the default variable type."""
        table = FLangSymbolTable()
        table.define_variable("x")
        assert table.lookup_variable_type("x") == FLangType.ANY

    def test_redefinition_overwrites(self):
        """Test that a later definition replaces the type."""
        table = FLangSymbolTable()
        table.define_variable("x", FLangType.NUMBER)
        table.define_variable("x", FLangType.BOOL)
        assert table.lookup_variable_type("x") == FLangType.BOOL

    def test_parent_chain(self):
        """Test that lookups reach enclosing scopes and children shadow parents."""
        outer = FLangSymbolTable()
        outer.define_variable("x", FLangType.NUMBER)
        outer.define_variable("y", FLangType.LIST)
        inner = FLangSymbolTable(outer)
        inner.define_variable("x", FLangType.BOOL)

        assert inner.lookup_variable_type("x") == FLangType.BOOL
        assert inner.lookup_variable_type("y") == FLangType.LIST
        assert outer.lookup_variable_type("x") == FLangType.NUMBER

    def test_functions(self):
        """Test recording and finding functions."""
        outer = FLangSymbolTable()
        body = FLangASTAtom("x")
        outer.define_function("f", ("x",), body)
        inner = FLangSymbolTable(outer)

        assert inner.lookup_function("f") == (("x",), body)
        assert inner.lookup_function("g") is None

    def test_self_referential_chain_terminates(self):
        """Test that a cyclic parent chain ends the search instead of looping."""
        table = FLangSymbolTable()
        table.parent = table
        assert table.lookup_variable_type("missing") is None
        assert table.lookup_function("missing") is None

    def test_two_frame_cycle_terminates(self):
        """Test a longer cycle."""
        a = FLangSymbolTable()
        b = FLangSymbolTable(a)
        a.parent = b
        b.define_variable("found", FLangType.NULL)
        assert a.lookup_variable_type("found") == FLangType.NULL
        assert a.lookup_variable_type("missing") is None

    def test_type_names(self):
        """Test how type tags print."""
        assert str(FLangType.NUMBER) == "number"
        assert str(FLangType.BOOL) == "bool"


class TestEnvironment:
    """Test FLangEnvironment runtime frames."""

    def test_define_and_lookup(self):
        """Test binding and reading."""
        env = FLangEnvironment()
        env.define("x", FLangInteger(1))
        assert env.lookup("x") == FLangInteger(1)

    def test_define_only_touches_this_frame(self):
        """Test that define shadows rather than updates an outer binding."""
        outer = FLangEnvironment(name="outer")
        outer.define("x", FLangInteger(1))
        inner = FLangEnvironment(outer, name="inner")
        inner.define("x", FLangInteger(2))

        assert inner.lookup("x") == FLangInteger(2)
        assert outer.lookup("x") == FLangInteger(1)

    def test_shared_by_reference(self):
        """Test that a child sees later changes to its parent."""
        outer = FLangEnvironment()
        inner = FLangEnvironment(outer)
        outer.define("late", FLangInteger(3))
        assert inner.lookup("late") == FLangInteger(3)

    def test_find_missing(self):
        """Test that find returns None for unbound names."""
        assert FLangEnvironment().find("x") is None
        assert not FLangEnvironment().has_binding("x")

    def test_lookup_missing_raises(self):
        """Test the undefined atom error."""
        with pytest.raises(FLangEvalError, match="Undefined atom: 'x'"):
            FLangEnvironment().lookup("x")

    def test_available_bindings(self):
        """Test listing visible names."""
        outer = FLangEnvironment()
        outer.define("a", FLangInteger(1))
        inner = FLangEnvironment(outer)
        inner.define("b", FLangInteger(2))
        assert sorted(inner.get_available_bindings()) == ["a", "b"]

    def test_repr(self):
        """Test the debugging representation."""
        outer = FLangEnvironment(name="global")
        inner = FLangEnvironment(outer, name="prog")
        assert "prog" in repr(inner)
        assert "parent: global" in repr(inner)
