# Core components: config, logging
from .config import APP_VERSION, EngineSettings, RedisSettings, get_settings
from .logging_config import setup_logging, get_engine_logger, CustomJsonFormatter
