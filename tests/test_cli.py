import pytest
from click.testing import CliRunner

from git_identities_cli.main import cli


CONFIG_YAML = """\
version: "1"
accounts:
  work:
    email: w@example.com
    codebase_dir: Code/work
  personal:
    email: p@example.com
    codebase_dir: Code/personal
    host: github.com-pers
"""


@pytest.fixture
def runner(home, monkeypatch):
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("GIT_IDENTITIES_CONFIG", raising=False)
    monkeypatch.setenv("COLUMNS", "250")
    return CliRunner()


@pytest.fixture
def config_file(home):
    path = home / ".git-identities" / "config.yaml"
    path.parent.mkdir()
    path.write_text(CONFIG_YAML)
    return path


def test_setup(runner, home, fake_tools):
    result = runner.invoke(cli, [
        "setup", "acc1",
        "--email", "a@example.com",
        "--codebase-dir", "Code/acc1",
    ])

    assert result.exit_code == 0, result.output
    assert "acc1" in result.output
    assert (home / ".ssh" / "id_ed25519_acc1").exists()
    assert "Host github.com-acc1" in (home / ".ssh" / "config").read_text()
    assert (home / "Code" / "acc1" / ".gitconfig").exists()


def test_setup_invalid_email(runner, fake_tools):
    result = runner.invoke(cli, ["setup", "acc1", "--email", "nope", "--codebase-dir", "Code"])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert fake_tools.calls == []


def test_setup_without_home_runs_nothing(runner, fake_tools):
    result = runner.invoke(
        cli,
        ["setup", "acc1", "--email", "a@example.com", "--codebase-dir", "Code/acc1"],
        env={"HOME": None},
    )

    assert result.exit_code == 1
    assert "HOME" in result.output
    assert fake_tools.calls == []


def test_setup_existing_key_fails(runner, home, fake_tools):
    args = ["setup", "acc1", "--email", "a@example.com", "--codebase-dir", "Code/acc1"]
    runner.invoke(cli, args)

    result = runner.invoke(cli, args)

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_setup_existing_key_reuse(runner, home, fake_tools):
    args = ["setup", "acc1", "--email", "a@example.com", "--codebase-dir", "Code/acc1"]
    runner.invoke(cli, args)

    result = runner.invoke(cli, args + ["--on-existing-key", "reuse", "--dedupe"])

    assert result.exit_code == 0, result.output
    assert fake_tools.tools == ["ssh-keygen", "ssh-add", "ssh-add"]
    assert (home / ".gitconfig").read_text().count("includeIf") == 1


def test_apply_all(runner, home, config_file, fake_tools):
    result = runner.invoke(cli, ["apply"])

    assert result.exit_code == 0, result.output
    assert (home / ".ssh" / "id_ed25519_work").exists()
    assert (home / ".ssh" / "id_ed25519_personal").exists()
    ssh_config = (home / ".ssh" / "config").read_text()
    assert "Host github.com-work" in ssh_config
    assert "Host github.com-pers" in ssh_config


def test_apply_selected(runner, home, config_file, fake_tools):
    result = runner.invoke(cli, ["apply", "personal"])

    assert result.exit_code == 0, result.output
    assert not (home / ".ssh" / "id_ed25519_work").exists()
    assert (home / ".ssh" / "id_ed25519_personal").exists()


def test_apply_unknown_name(runner, config_file, fake_tools):
    result = runner.invoke(cli, ["apply", "personal", "ghost"])

    assert result.exit_code == 1
    assert "ghost" in result.output
    assert fake_tools.calls == []


def test_apply_config_from_env(runner, home, tmp_path, monkeypatch, fake_tools):
    path = tmp_path / "elsewhere.yaml"
    path.write_text(CONFIG_YAML)
    monkeypatch.setenv("GIT_IDENTITIES_CONFIG", str(path))

    result = runner.invoke(cli, ["apply", "work"])

    assert result.exit_code == 0, result.output
    assert (home / ".ssh" / "id_ed25519_work").exists()


def test_apply_missing_config(runner, fake_tools):
    result = runner.invoke(cli, ["apply"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_apply_stops_on_agent_failure(runner, home, config_file, fake_tools):
    fake_tools.fail("ssh-add", stderr="no agent")

    result = runner.invoke(cli, ["apply"])

    assert result.exit_code == 1
    assert "no agent" in result.output
    assert fake_tools.tools == ["ssh-keygen", "ssh-add"]


def test_list(runner, home, config_file, fake_tools):
    runner.invoke(cli, ["apply", "work"])

    result = runner.invoke(cli, ["list"])

    assert result.exit_code == 0, result.output
    assert "work" in result.output
    assert "personal" in result.output
    assert "present" in result.output
    assert "missing" in result.output


def test_pubkey(runner, fake_tools):
    runner.invoke(cli, ["setup", "acc1", "--email", "a@example.com", "--codebase-dir", "Code/acc1"])

    result = runner.invoke(cli, ["pubkey", "acc1"])

    assert result.exit_code == 0
    assert result.output.strip() == "ssh-ed25519 AAAAC3Nzafake a@example.com"


def test_pubkey_missing(runner):
    result = runner.invoke(cli, ["pubkey", "ghost"])

    assert result.exit_code == 1
    assert "No public key" in result.output


def test_setup_with_non_utf8_ssh_config(runner, home, fake_tools):
    (home / ".ssh").mkdir()
    (home / ".ssh" / "config").write_bytes(b"# caf\xe9\nHost old\n")

    result = runner.invoke(cli, ["setup", "acc1", "--email", "a@example.com", "--codebase-dir", "Code/acc1"])

    assert result.exit_code == 0, result.output
    content = (home / ".ssh" / "config").read_bytes()
    assert content.startswith(b"# caf\xe9\nHost old\n")
    assert b"Host github.com-acc1\n" in content


def test_setup_rejects_comment_characters_in_name(runner, home, fake_tools):
    result = runner.invoke(cli, ["setup", "dev#1", "--email", "a@example.com", "--codebase-dir", "Code/dev"])

    assert result.exit_code == 1
    assert "may only contain" in result.output
    assert fake_tools.calls == []
    assert not (home / "Code" / "dev").exists()


def test_apply_selected_in_command_line_order(runner, config_file, fake_tools):
    result = runner.invoke(cli, ["apply", "personal", "work", "personal"])

    assert result.exit_code == 0, result.output
    keygen_comments = [c[c.index("-C") + 1] for c in fake_tools.calls if c[0] == "ssh-keygen"]
    assert keygen_comments == ["p@example.com", "w@example.com"]
