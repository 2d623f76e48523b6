from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from functools import lru_cache


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # GitHub
    GITHUB_TOKEN: str = ""
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_USER_AGENT: str = "UEGitHubManager"
    GITHUB_REQUEST_TIMEOUT: int = 30

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/github_manager.log"

    @field_validator("GITHUB_TOKEN")
    @classmethod
    def validate_github_token(cls, v: str) -> str:
        """GitHub tokenの形式検証（空の場合はスキップ）"""
        valid_prefixes = ("ghp_", "github_pat_", "gho_", "ghs_", "ghu_")
        if v and not v.startswith(valid_prefixes):
            raise ValueError(
                "Invalid GitHub token format. Must start with one of: ghp_, github_pat_, gho_, ghs_, ghu_"
            )
        return v

    @field_validator("GITHUB_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def graphql_url(self) -> str:
        """GraphQLエンドポイントURL"""
        return f"{self.GITHUB_API_URL}/graphql"


@lru_cache()
def get_settings() -> Settings:
    """設定のシングルトンインスタンスを取得"""
    return Settings()


settings = get_settings()
