from helpers.unified_logger import get_client_logger, get_logger


def test_component_id_includes_context():
    logger = get_client_logger("bilibili", account="main")
    assert logger.component_id == "CLIENT:BILIBILI:account=main"


def test_with_context_extends_existing_context():
    logger = get_logger("client", "bilibili", {"account": "main"}, log_level="debug")
    scoped = logger.with_context(endpoint="nav")

    assert scoped.component_id == "CLIENT:BILIBILI:account=main:endpoint=nav"
    assert scoped.log_level == "DEBUG"
    assert logger.context == {"account": "main"}


def test_log_level_defaults_to_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert get_logger("client", "bilibili").log_level == "WARNING"
