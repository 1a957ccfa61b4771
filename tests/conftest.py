from pathlib import Path

from pytest import MonkeyPatch, fixture

from shellexec import dirs


@fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: MonkeyPatch) -> Path:
    """Keep config files on the host from changing default options."""
    app_dir = tmp_path / "user-config"
    monkeypatch.setattr(dirs, "app_dir", app_dir)
    monkeypatch.chdir(tmp_path)
    return app_dir
