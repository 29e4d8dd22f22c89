#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - Configuration
Environment-driven configuration with validation
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import pytz

class Environment(Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"

class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class StoreBackend(Enum):
    FILE = "file"
    SUPABASE = "supabase"

@dataclass
class StorageConfig:
    """Where the document and its local fallback copy live"""
    backend: StoreBackend
    document_path: Path
    cache_path: Path
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_table: str = "checkmate_data"

@dataclass
class SyncConfig:
    debounce_seconds: float = 1.5
    timezone: str = "Asia/Seoul"

@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    debug_mode: bool = False

class CheckmateConfig:
    """Main configuration object"""

    def __init__(self, ensure_directories: bool = True):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()
        if ensure_directories:
            self._ensure_directories()

    def _load_config(self):
        self.data_dir = Path(os.getenv('DATA_DIR', 'data'))
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        self.storage = StorageConfig(
            backend=StoreBackend(os.getenv('STORE_BACKEND', 'file').lower()),
            document_path=self.data_dir / os.getenv('DOCUMENT_FILE', 'checkmate_data.json'),
            cache_path=self.data_dir / os.getenv('CACHE_FILE', 'local_cache.json'),
            supabase_url=os.getenv('SUPABASE_URL'),
            supabase_key=os.getenv('SUPABASE_KEY'),
            supabase_table=os.getenv('SUPABASE_TABLE', 'checkmate_data'),
        )

        self.sync = SyncConfig(
            debounce_seconds=float(os.getenv('SYNC_DEBOUNCE_SECONDS', 1.5)),
            timezone=os.getenv('TIMEZONE', 'Asia/Seoul'),
        )

        self.server = ServerConfig(
            host=os.getenv('HOST', '0.0.0.0'),
            port=int(os.getenv('PORT', 8000)),
            debug_mode=os.getenv('DEBUG_MODE', 'false').lower() == 'true',
        )

        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
        self.log_to_file = os.getenv('LOG_TO_FILE', 'true').lower() == 'true'
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

        self.allowed_origins = [
            origin.strip() for origin in os.getenv('ALLOWED_ORIGINS', '*').split(',') if origin.strip()
        ]

    def _validate_config(self):
        errors = []

        if self.storage.backend is StoreBackend.SUPABASE:
            if not self.storage.supabase_url:
                errors.append("SUPABASE_URL is required when STORE_BACKEND=supabase")
            if not self.storage.supabase_key:
                errors.append("SUPABASE_KEY is required when STORE_BACKEND=supabase")

        if self.sync.debounce_seconds < 0:
            errors.append(f"SYNC_DEBOUNCE_SECONDS must not be negative ({self.sync.debounce_seconds})")

        if self.sync.timezone not in pytz.all_timezones_set:
            errors.append(f"Unknown TIMEZONE {self.sync.timezone}")

        if not 1 <= self.server.port <= 65535:
            errors.append(f"Port {self.server.port} is out of range (1-65535)")

        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"• {error}" for error in errors))

    def _ensure_directories(self):
        for directory in [self.data_dir, self.log_dir]:
            directory.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stdout
                }
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'httpx': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'apscheduler': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'uvicorn.access': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                }
            }
        }

        if self.log_to_file:
            config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"checkmate_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return config

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def to_dict(self) -> Dict[str, Any]:
        return {
            'environment': self.environment.value,
            'storage': {
                'backend': self.storage.backend.value,
                'document_path': str(self.storage.document_path),
                'cache_path': str(self.storage.cache_path),
                'supabase_table': self.storage.supabase_table,
            },
            'sync': {
                'debounce_seconds': self.sync.debounce_seconds,
                'timezone': self.sync.timezone,
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'debug_mode': self.server.debug_mode
            },
            'log_level': self.log_level.value
        }

@lru_cache(maxsize=1)
def get_config() -> CheckmateConfig:
    return CheckmateConfig()

__all__ = [
    'CheckmateConfig',
    'Environment',
    'LogLevel',
    'StoreBackend',
    'StorageConfig',
    'SyncConfig',
    'ServerConfig',
    'get_config',
]
