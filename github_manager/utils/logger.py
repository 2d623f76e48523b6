import logging
from pathlib import Path
from typing import Optional
from github_manager.config import Settings, settings as default_settings

PACKAGE_LOGGER = "github_manager"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(config: Optional[Settings] = None) -> logging.Logger:
    """パッケージのルートロガーにハンドラを設定

    各モジュールのロガーはこのロガーに伝播します。設定済みの場合は
    レベルのみ更新します。LOG_FILE が空の場合はファイル出力を行いません。

    Args:
        config: 設定（省略時はグローバル設定）

    Returns:
        logging.Logger: パッケージのルートロガー
    """
    config = config or default_settings
    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))

    if root.handlers:
        return root

    formatter = logging.Formatter(LOG_FORMAT)

    if config.LOG_FILE:
        log_path = Path(config.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    return root


def get_logger(name: str) -> logging.Logger:
    """ロガーインスタンスを取得

    Args:
        name: ロガー名（通常は__name__を渡す）

    Returns:
        logging.Logger: パッケージ配下のロガー
    """
    configure_logging()
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def redact_token(token: str) -> str:
    """ログ出力用にトークンをマスク

    Args:
        token: アクセストークン

    Returns:
        str: 先頭と末尾4文字のみ残した文字列
    """
    if not token:
        return "unset"
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}...{token[-4:]}"
