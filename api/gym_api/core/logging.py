import sys
import os
from loguru import logger
import json
from datetime import datetime

# Log configurations
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv(
    "LOG_FORMAT",
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{function}:{line} - {message}"
)
LOG_FILE = os.getenv("LOG_FILE", "./logs/api.log")

# Ensure log directory exists
log_dir = os.path.dirname(os.path.abspath(LOG_FILE))
try:
    os.makedirs(log_dir, exist_ok=True)
except OSError as e:
    print(f"Warning: Could not create log directory at {log_dir}: {e}")
    # Fallback to a user-writable location
    home_dir = os.path.expanduser("~")
    log_dir = os.path.join(home_dir, "gym_api_logs")
    os.makedirs(log_dir, exist_ok=True)
    LOG_FILE = os.path.join(log_dir, "api.log")
    print(f"Using fallback log location: {LOG_FILE}")


class JsonSerializer:
    """
    Custom serializer for JSON logging
    """
    def __call__(self, record):
        log_data = {
            "timestamp": record["time"].strftime("%Y-%m-%d %H:%M:%S.%f"),
            "level": record["level"].name,
            "message": record["message"],
            "module": record["name"],
            "function": record["function"],
            "line": record["line"],
            "process_id": record["process"].id,
        }

        if record["exception"]:
            log_data["exception"] = {
                "type": record["exception"].type.__name__,
                "value": str(record["exception"].value),
            }

        # Bound context (client, path, reason, ...)
        log_data.update(record["extra"])

        return json.dumps(log_data, default=str)


def json_format(serializer=None):
    """
    loguru format callable emitting one JSON document per record
    """
    serializer = serializer or JsonSerializer()

    def formatter(record):
        # Stashed in extra so the template never interprets the JSON braces
        record["extra"]["_json"] = serializer(record)
        return "{extra[_json]}\n"

    return formatter


def setup_logging():
    """
    Configure application logging
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=LOG_LEVEL,
        colorize=True
    )

    log_dir = os.path.dirname(os.path.abspath(LOG_FILE))
    if os.path.isdir(log_dir):
        try:
            logger.add(
                LOG_FILE,
                format=LOG_FORMAT,
                level=LOG_LEVEL,
                rotation="10 MB",
                retention="1 week",
                compression="zip"
            )

            # Structured copy of every record for log shipping
            logger.add(
                os.path.join(log_dir, "api.json"),
                format=json_format(),
                level=LOG_LEVEL,
                rotation="10 MB",
                retention="1 week",
                compression="zip"
            )

            logger.info(f"File logging initialized at {LOG_FILE}")
        except Exception as e:
            logger.error(f"Failed to initialize file logging: {e}")
    else:
        logger.warning(f"Skipping file logging as directory {log_dir} is not accessible")

    logger.info("Logging system initialized")


def get_request_logger(request_id=None):
    """
    Create a contextualized logger for a request
    """
    if not request_id:
        request_id = f"req-{datetime.now().strftime('%Y%m%d%H%M%S')}-{id(datetime.now())}"

    return logger.bind(request_id=request_id)
