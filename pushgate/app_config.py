from starlette.config import Config
from starlette.datastructures import URL

from pushgate.logging import get_logging_level

config = Config(".env")

PORT = config("PORT", cast=int, default=8000)
HOOK_TOKEN = config("HOOK_TOKEN")
REDIS_URL = config("REDIS_URL", cast=URL, default=None) or config(
    "REDISCLOUD_URL", cast=URL
)
# if we don't get a reply from Redis within a short period, we have an error
# because we always expect short response times from redis.
REDIS_SOCKET_TIMEOUT_SEC = config("REDIS_SOCKET_TIMEOUT_SEC", cast=int, default=90)
# if we can't open a TCP connection quickly, we should raise a timeout.
REDIS_SOCKET_CONNECT_TIMEOUT_SEC = config(
    "REDIS_SOCKET_CONNECT_TIMEOUT_SEC", cast=int, default=30
)
# The build worker polls `<QUEUE_PREFIX>:queue:<QUEUE_NAME>`.
QUEUE_NAME = config("QUEUE_NAME", default="build")
QUEUE_PREFIX = config("QUEUE_PREFIX", default="resque")
LOGGING_LEVEL = get_logging_level(config("LOGGING_LEVEL", default="INFO"))
