import json
import logging
import logging.config
from contextvars import ContextVar
from pathlib import Path
from typing import Dict, Any, Optional

# 当前请求的调用者，由 deps.get_request_context 在鉴权通过后绑定
_tenant_id: ContextVar[Optional[str]] = ContextVar("tenant_id", default=None)
_user_id: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

CONTEXT_FIELDS = ("tenant_id", "user_id")


def bind_request_context(tenant_id: Optional[str], user_id: Optional[str]) -> None:
    _tenant_id.set(tenant_id)
    _user_id.set(user_id)


class RequestContextFilter(logging.Filter):
    """
    给每条日志补上 tenant_id / user_id。
    显式通过 extra 传入的值优先；请求之外的日志记为 "-"。
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "tenant_id", None) is None:
            record.tenant_id = _tenant_id.get() or "-"
        if getattr(record, "user_id", None) is None:
            record.user_id = _user_id.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
            "lineno": record.lineno,
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, "-")
            if value != "-":
                log_record[key] = value
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, ensure_ascii=False)


def get_logging_config(log_file_path: str, log_level: str = "INFO") -> Dict[str, Any]:

    log_path = Path(log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handlers = ['console', 'file']

    return {
        'version': 1,
        'disable_existing_loggers': False,

        'filters': {
            'request_context': {'()': RequestContextFilter},
        },

        'formatters': {
            # 控制台：租户/用户放在消息前，便于按调用者排查权限问题
            'standard': {
                'format': '%(name)s [tenant=%(tenant_id)s user=%(user_id)s] %(message)s',
            },
            'json': {
                '()': JsonFormatter,
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
        },

        'handlers': {
            'console': {
                'class': 'rich.logging.RichHandler',
                'level': log_level,
                'formatter': 'standard',
                'filters': ['request_context'],
                'rich_tracebacks': True,
                'show_path': False,
                'markup': False
            },
            'file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'DEBUG',
                'formatter': 'json',
                'filters': ['request_context'],
                'filename': str(log_path),
                'mode': 'a',
                'maxBytes': 10 * 1024 * 1024,
                'backupCount': 5,
                'encoding': 'utf-8'
            }
        },

        'loggers': {
            '': {'level': log_level, 'handlers': handlers},
            # 权限拒绝记 INFO，存储错误记 ERROR
            'videohub': {'level': 'DEBUG', 'handlers': handlers, 'propagate': False},

            # uvicorn 接管
            'uvicorn': {'level': 'INFO', 'handlers': handlers, 'propagate': False},
            'uvicorn.access': {'level': 'WARNING', 'handlers': handlers, 'propagate': False},

            # 数据库驱动降噪
            'sqlalchemy.engine': {'level': 'WARNING'},
            'aiosqlite': {'level': 'WARNING'},
            'asyncio': {'level': 'WARNING'},
        }
    }


def setup_logging(log_file_path: str, log_level: str = "INFO"):
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    logging.config.dictConfig(get_logging_config(log_file_path, log_level))
