import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path so `import tersegrep...` works locally
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _isolate_user_state(tmp_path_factory, monkeypatch):
    """Keep the usage history and global git ignore file inside a temp dir."""
    state = tmp_path_factory.mktemp("user-state")
    monkeypatch.setenv("TERSEGREP_DB_PATH", str(state / "history.db"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(state / "config"))
    yield


@pytest.fixture
def auth_project(tmp_path):
    """Two-file project: an auth module and an unrelated logger."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "src" / "auth.rs").write_text(
        "\n"
        "pub struct Session {}\n"
        "\n"
        "pub fn refresh_token(session: &Session) -> String {\n"
        '    format!("new-token-{}", 1)\n'
        "}\n"
    )
    (root / "src" / "logger.rs").write_text(
        "\n"
        "pub fn log_info(msg: &str) {\n"
        '    println!("{}", msg);\n'
        "}\n"
    )
    return root
