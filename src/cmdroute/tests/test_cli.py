"""
Integration tests for the command-line front end and the shell host.
"""

import io
from unittest.mock import patch

import pytest
from rich.console import Console

from cmdroute import demo
from cmdroute.cli import Shell, handle_cli_command, load_dispatcher, parse_args, split_line, split_partial
from cmdroute.config import ConfigurationError, DispatchSettings
from cmdroute.core import CommandTable, Dispatcher, InvokerKind, RecordingInstrumentation, SimpleInvoker

pytestmark = pytest.mark.integration


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120)


def output(console):
    return console.file.getvalue()


class TestLineSplitting:

    def test_split_line_handles_quotes(self):
        assert split_line('econ pay "big bob" 10') == ["econ", "pay", "big bob", "10"]

    def test_split_line_falls_back_on_bad_quotes(self):
        assert split_line('econ pay "bob') == ["econ", "pay", '"bob']

    @pytest.mark.parametrize("raw, parts, prefix", [
        ("", [], ""),
        ("ec", ["ec"], "ec"),
        ("econ ", ["econ", ""], ""),
        ("econ pay b", ["econ", "pay", "b"], "b"),
        ("econ pay bob ", ["econ", "pay", "bob", ""], ""),
    ])
    def test_split_partial(self, raw, parts, prefix):
        assert split_partial(raw) == (parts, prefix)


class TestShell:

    @pytest.fixture
    def shell(self, console):
        table = CommandTable()
        create = demo.create_dispatcher(instrumentation=RecordingInstrumentation())
        create.activate(table)
        invoker = SimpleInvoker("alice", kind=InvokerKind.PLAYER, permissions=["pay"])
        return Shell(table, invoker, console=console)

    def test_run_line(self, shell):
        assert shell.run_line("econ pay bob 10") is True
        assert shell.invoker.messages == ["Paid 10 to bob"]

    def test_blank_line(self, shell):
        assert shell.run_line("   ") is None

    def test_unknown_root(self, shell, console):
        assert shell.run_line("bank deposit") is None
        assert "Unknown command: bank" in output(console)

    def test_suggest_root_names(self, shell):
        assert shell.suggest("") == ["econ"]
        assert shell.suggest("E") == ["econ"]
        assert shell.suggest("x") == []

    def test_suggest_arguments(self, shell):
        assert shell.suggest("econ ") == ["balance", "pay", "reset"]
        assert shell.suggest("econ pa") == ["pay"]
        assert shell.suggest("econ pay c") == ["carol"]
        assert shell.suggest("bank x") == []

    def test_loop_runs_until_exit(self, shell):
        with patch.object(Shell, "_install_completion", return_value=False), \
                patch("builtins.input", side_effect=["econ balance", "", "EXIT", "econ balance"]):
            assert shell.loop() == 0

        assert shell.invoker.messages == ["alice: 100"]

    def test_loop_stops_on_eof(self, shell):
        with patch.object(Shell, "_install_completion", return_value=False), \
                patch("builtins.input", side_effect=EOFError):
            assert shell.loop() == 0


class TestLoadDispatcher:

    def test_factory(self):
        dispatcher = load_dispatcher("cmdroute.demo:create_dispatcher", DispatchSettings(debug=True))

        assert isinstance(dispatcher, Dispatcher)
        assert dispatcher.root_name == "econ"
        assert dispatcher.settings.debug is True

    def test_instance(self, monkeypatch):
        prebuilt = Dispatcher("prebuilt", instrumentation=RecordingInstrumentation())
        monkeypatch.setattr(demo, "PREBUILT", prebuilt, raising=False)

        assert load_dispatcher("cmdroute.demo:PREBUILT", DispatchSettings()) is prebuilt

    def test_factory_receives_only_accepted_arguments(self, monkeypatch):
        monkeypatch.setattr(demo, "build", lambda settings: Dispatcher("x", settings=settings), raising=False)
        settings = DispatchSettings(permission_prefix="plugin.")

        assert load_dispatcher("cmdroute.demo:build", settings).settings is settings

    @pytest.mark.parametrize("path", ["cmdroute.nothing_here:build", "cmdroute.demo:nothing_here"])
    def test_missing_targets(self, path):
        with pytest.raises(ConfigurationError, match="Cannot load dispatcher"):
            load_dispatcher(path, DispatchSettings())

    def test_non_dispatcher(self):
        with pytest.raises(ConfigurationError, match="did not produce a Dispatcher"):
            load_dispatcher("cmdroute.demo:Ledger", DispatchSettings())


class TestHandleCliCommand:

    @pytest.fixture(autouse=True)
    def quiet_logging(self):
        with patch("cmdroute.cli.handlers.setup_logging"):
            yield

    @pytest.fixture
    def config_file(self, tmp_path):
        path = tmp_path / "cmdroute.yaml"
        path.write_text("dispatch:\n  log_execution: false\n", encoding="utf-8")
        return str(path)

    def run(self, console, *argv):
        return handle_cli_command(parse_args(list(argv)), console=console)

    def test_exec_from_console(self, console, config_file):
        assert self.run(console, "--config", config_file, "--exec", "econ balance bob") == 0
        assert "bob: 25" in output(console)

    def test_exec_as_player(self, console, config_file):
        code = self.run(
            console, "--config", config_file,
            "--as-player", "--name", "alice", "--grant", "pay", "--exec", "econ pay bob 10"
        )

        assert code == 0
        assert "Paid 10 to bob" in output(console)

    def test_console_without_grant_is_refused(self, console, config_file):
        assert self.run(console, "--config", config_file, "--exec", "econ pay bob 10") == 0
        assert "You do not have permission to execute this command!" in output(console)

    def test_unknown_command_exit_code(self, console, config_file):
        assert self.run(console, "--config", config_file, "--exec", "bank") == 1
        assert "Unknown command: bank" in output(console)

    def test_complete(self, console, config_file):
        assert self.run(console, "--config", config_file, "--complete", "econ ") == 0
        assert output(console).split() == ["balance", "pay", "reset"]

    def test_undeclared_root_fails(self, console, tmp_path):
        path = tmp_path / "declared.yaml"
        path.write_text("shell:\n  declared_commands: [bank]\n", encoding="utf-8")

        assert self.run(console, "--config", str(path), "--exec", "econ") == 1
        assert "not declared" in output(console)

    def test_bad_dispatcher_path(self, console, config_file):
        assert self.run(console, "--config", config_file, "--dispatcher", "cmdroute.demo:missing") == 1
        assert "Configuration error" in output(console)

    def test_missing_config_file(self, console, tmp_path):
        assert self.run(console, "--config", str(tmp_path / "missing.yaml")) == 1
