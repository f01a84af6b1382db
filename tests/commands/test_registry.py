"""
Tests for the command registry and descriptor construction
"""
import threading

import pytest

from cmdseam.commands.descriptor import CommandDescriptor, ParameterSpec, create_command
from cmdseam.commands.parsers import number_parser, string_parser
from cmdseam.commands.registry import CommandRegistry
from cmdseam.errors import UnknownCommandError


async def _noop(args, emit):
    return None


def _command(name, description="test"):
    return CommandDescriptor(name=name, description=description, execute=_noop)


class TestCommandRegistry:
    """Insert-once registration"""

    def test_duplicate_registration_is_rejected(self):
        registry = CommandRegistry()
        original = _command("status", "original")
        assert registry.register(original) is True
        assert registry.register(_command("status", "replacement")) is False
        assert registry.lookup("status") is original
        assert len(registry) == 1

    def test_lookup_unknown(self):
        assert CommandRegistry().lookup("missing") is None

    def test_resolve(self):
        status = _command("status")
        registry = CommandRegistry([status])
        assert registry.resolve("status") is status
        with pytest.raises(UnknownCommandError) as exc_info:
            registry.resolve("missing")
        assert exc_info.value.name == "missing"

    def test_list_all_keeps_insertion_order(self):
        registry = CommandRegistry([_command("zeta"), _command("alpha"), _command("mid")])
        assert [d.name for d in registry.list_all()] == ["zeta", "alpha", "mid"]
        assert registry.names() == ["zeta", "alpha", "mid"]
        assert "alpha" in registry

    def test_initial_duplicates_keep_first(self):
        first = _command("dup", "first")
        registry = CommandRegistry([first, _command("dup", "second")])
        assert registry.lookup("dup") is first

    def test_concurrent_registration_single_winner(self):
        registry = CommandRegistry()
        results = []

        def worker(i):
            results.append(registry.register(_command("shared", str(i))))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results.count(True) == 1
        assert len(registry) == 1


class TestCreateCommand:
    """Collaborator command shape"""

    def test_base_flag_marks_positional(self):
        descriptor = create_command("greet", "Say hello", {
            "name": {"base": True, "description": "Who", "parser": string_parser()},
            "loud": {"description": "Volume", "parser": number_parser(optional=True)},
        }, _noop)
        assert [p.name for p in descriptor.parameters] == ["name", "loud"]
        assert [p.name for p in descriptor.positional_parameters] == ["name"]
        assert descriptor.get_parameter("loud").description == "Volume"
        assert descriptor.get_parameter("nope") is None

    def test_accepts_parameter_specs(self):
        spec = ParameterSpec("n", number_parser(), "Number", positional=True)
        descriptor = create_command("count", "Count", {"n": spec}, _noop)
        assert descriptor.parameters == [spec]

    def test_missing_parser_rejected(self):
        with pytest.raises(ValueError):
            create_command("bad", "Bad", {"x": {"description": "no parser"}}, _noop)

    def test_duplicate_parameter_names_rejected(self):
        with pytest.raises(ValueError):
            CommandDescriptor("bad", "Bad", _noop, [
                ParameterSpec("x", string_parser()),
                ParameterSpec("x", string_parser()),
            ])
