import pytest
from srs_check.errors import ConfigError
from srs_cli.config import CheckConfig


def test_defaults_without_config_file(tmp_path):
    config = CheckConfig(root=tmp_path).build()

    assert config.jobs == 1
    assert config.check_orphans
    assert config.check_placement
    assert config.docs_glob == "**/devdoc/*_requirements.md"
    assert ".c" in config.source_extensions


def test_reads_dedicated_file_first(tmp_path):
    (tmp_path / ".srs-check.toml").write_text('[tool.srs-check]\njobs = 3\ntest_suffixes = ["_ut"]\n')
    (tmp_path / "pyproject.toml").write_text("[tool.srs-check]\njobs = 5\n")

    loader = CheckConfig(root=tmp_path)
    config = loader.build()

    assert loader.source == tmp_path / ".srs-check.toml"
    assert config.jobs == 3
    assert config.test_suffixes == ["_ut"]


def test_reads_pyproject(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n\n[tool.srs-check]\ncheck_placement = false\n')

    assert CheckConfig(root=tmp_path).build().check_placement is False


def test_overrides_win_unless_none(tmp_path):
    (tmp_path / ".srs-check.toml").write_text("[tool.srs-check]\njobs = 3\ncheck_orphans = false\n")

    config = CheckConfig(root=tmp_path).build(jobs=8, check_orphans=None)

    assert config.jobs == 8
    assert config.check_orphans is False


def test_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        CheckConfig(tmp_path / "missing.toml")


def test_invalid_toml(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[tool.srs-check\n")

    with pytest.raises(ConfigError):
        CheckConfig(path)


def test_invalid_value(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[tool.srs-check]\njobs = 0\n")

    with pytest.raises(ConfigError, match="invalid configuration"):
        CheckConfig(path).build()
