"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
import logging
from logging.handlers import RotatingFileHandler


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    app_id: Optional[str] = None
    private_key_path: Optional[str] = None
    webhook_secret: Optional[str] = None
    timeout_seconds: int = 30
    user_agent: str = "Chronicler/1.0"

    @property
    def uses_app_credentials(self) -> bool:
        return bool(self.app_id and self.private_key_path)


@dataclass
class AnalysisConfig:
    """분석 설정"""
    settings_path: str = ".starchart-labs/chronicler.yml"
    page_size: int = 30
    status_context: str = "doc/chronicler"


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class ServerConfig:
    """웹훅 서버 설정"""
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                app_id=os.getenv("GITHUB_APP_ID"),
                private_key_path=os.getenv("GITHUB_APP_PRIVATE_KEY_PATH"),
                webhook_secret=os.getenv("GITHUB_WEBHOOK_SECRET"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
                user_agent=os.getenv("GITHUB_USER_AGENT", "Chronicler/1.0"),
            ),
            analysis=AnalysisConfig(
                settings_path=os.getenv("CHRONICLER_SETTINGS_PATH", ".starchart-labs/chronicler.yml"),
                page_size=int(os.getenv("CHRONICLER_PAGE_SIZE", "30")),
                status_context=os.getenv("CHRONICLER_STATUS_CONTEXT", "doc/chronicler"),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            server=ServerConfig(
                host=os.getenv("SERVER_HOST", "0.0.0.0"),
                port=int(os.getenv("SERVER_PORT", "8000")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(
            github=GitHubConfig(**config_data.get('github', {})),
            analysis=AnalysisConfig(**config_data.get('analysis', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            server=ServerConfig(**config_data.get('server', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # GitHub 인증 정보 필수 확인
        if not self.github.token and not self.github.uses_app_credentials:
            errors.append("GitHub token or app id and private key path is required")

        if self.github.private_key_path and not Path(self.github.private_key_path).exists():
            errors.append(f"GitHub app private key not found: {self.github.private_key_path}")

        # 페이지 크기 검증 (GitHub 최대 100)
        if not 1 <= self.analysis.page_size <= 100:
            errors.append("Page size must be between 1 and 100")

        if not self.analysis.settings_path.strip():
            errors.append("Settings path must not be empty")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'api_base_url': self.github.api_base_url,
                'app_id': self.github.app_id,
                'timeout_seconds': self.github.timeout_seconds,
                'user_agent': self.github.user_agent,
                # 보안상 토큰, 키, 시크릿은 제외
            },
            'analysis': {
                'settings_path': self.analysis.settings_path,
                'page_size': self.analysis.page_size,
                'status_context': self.analysis.status_context,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
            },
            'debug': self.debug,
        }


class ConfigManager:
    """설정 관리자"""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig.from_env()
        self._config.validate()
        self._setup_logging()

    @property
    def config(self) -> AppConfig:
        """현재 설정 반환"""
        return self._config

    def _setup_logging(self) -> None:
        """로깅 설정"""
        logging.basicConfig(
            level=getattr(logging, self._config.logging.level.upper()),
            format=self._config.logging.format,
        )

        # 파일 로깅이 설정된 경우 로테이션 설정
        if self._config.logging.file_path:
            handler = RotatingFileHandler(
                self._config.logging.file_path,
                maxBytes=self._config.logging.max_file_size,
                backupCount=self._config.logging.backup_count,
            )
            handler.setFormatter(logging.Formatter(self._config.logging.format))

            # 루트 로거에 핸들러 추가
            root_logger = logging.getLogger()
            root_logger.addHandler(handler)

        # 서드파티 라이브러리 로그 줄이기
        logging.getLogger("urllib3").setLevel(logging.WARNING)


# 전역 설정 관리자 인스턴스 (최초 사용 시 생성)
_config_manager: Optional[ConfigManager] = None


def get_config() -> AppConfig:
    """현재 설정 반환"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.config
