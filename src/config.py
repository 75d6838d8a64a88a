"""
アプリケーション設定

環境変数（接頭辞 LIFEDEATH_）または .env ファイルから読み込む。
例: LIFEDEATH_TURN_SWITCH_DELAY=1.2
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LIFEDEATH_", env_file=".env", env_file_encoding="utf-8", extra="ignore",
    )

    # ターン交代までの待ち時間（秒）。0なら即座に交代する
    turn_switch_delay: float = Field(default=0.0, ge=0.0)

    # 待機マスが1つしかない攻撃は選択を待たずに実行する
    auto_single_staging: bool = False

    log_level: str = "INFO"

    # APIサーバ
    host: str = "0.0.0.0"
    port: int = 8001


@lru_cache
def get_settings() -> Settings:
    """設定を取得（プロセス内で1度だけ読み込む）"""
    return Settings()
