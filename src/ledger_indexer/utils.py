import asyncio
from datetime import datetime, timezone
from dynaconf import Dynaconf, Validator
from functools import wraps
from loguru import logger
from pathlib import Path
import random
from typing import Union


def to_hex(value: Union[int, str]) -> str:
    """Encode a value the way the chain renders Uint64/Hash fields

    Integers become '0x' + even-length lowercase hex. Strings that already
    carry a '0x' prefix are returned lowercased, any other string is
    hex-encoded from its UTF-8 bytes.
    """
    if isinstance(value, bool):
        raise TypeError(f"Expected int or str, got {type(value)}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Cannot hex-encode negative value {value}")
        digits = format(value, 'x')
        if len(digits) % 2:
            digits = '0' + digits
        return '0x' + digits
    if isinstance(value, str):
        if value[:2].lower() == '0x':
            return value.lower()
        return '0x' + value.encode('utf-8').hex()
    raise TypeError(f"Expected int or str, got {type(value)}")

def parse_uint(value: Union[int, str]) -> int:
    """Parse an unsigned integer from an int, a 0x-prefixed hex string or a decimal string"""
    if isinstance(value, bool):
        raise TypeError(f"Expected int or str, got {type(value)}")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        stripped = value.strip()
        if stripped[:2].lower() == '0x':
            parsed = int(stripped, 16) if len(stripped) > 2 else 0
        else:
            parsed = int(stripped, 10)
    else:
        raise TypeError(f"Expected int or str, got {type(value)}")

    if parsed < 0:
        raise ValueError(f"Expected unsigned integer, got {value}")
    return parsed

def unix_to_utc(timestamp: Union[int, str]) -> datetime:
    """Convert a chain timestamp (milliseconds, int or hex) to a UTC datetime"""
    millis = parse_uint(timestamp)
    return datetime.fromtimestamp(millis / 1000, timezone.utc)

def load_config(file_name: str = "config.yml") -> Dynaconf:
    """Load and validate indexer configuration

    Params:
        file_name (str): Path of the config file. Relative paths are resolved
            against the project root.

    Returns:
        Dynaconf: Validated configuration object
    """
    config_path = Path(file_name)
    if not config_path.is_absolute():
        project_root = Path(__file__).resolve().parent.parent.parent
        config_path = project_root / file_name

    settings = Dynaconf(
        envvar_prefix="LEDGER",
        settings_files=[str(config_path)],
        validators=[
            # Validate structure and types
            Validator('chain.name', must_exist=True,
                     is_type_of=str,
                     condition=lambda x: x.islower() and x == x.strip(),
                     messages={"condition": "Chain name must be lowercase with no leading/trailing spaces"}
            ),
            Validator('chain.endpoint', must_exist=True, is_type_of=str),
            Validator('storage.database_uri', must_exist=True, is_type_of=str),
            # Defaults
            Validator('chain.poll_interval', default=1),
            Validator('cache.asset_capacity', default=1000, is_type_of=int, gte=1),
            Validator('fees.service', default='governance'),
            Validator('fees.events', default=['ConsumedTxFee'], is_type_of=list),
            Validator('metrics.port', default=8000),
            Validator('metrics.addr', default='0.0.0.0'),
            Validator('logging.file', default='logs/indexer.log'),
            Validator('logging.rotation', default='100 MB'),
            Validator('logging.retention', default='10 days'),
        ]
    )
    # Validate all settings at once
    settings.validators.validate()

    return settings

# Decorator for implementing retry logic with exponential backoff for async functions
def async_retry(
    retries: int = 3,
    base_delay: float = 1,
    exponential_backoff: bool = True,
    jitter: bool = True,
):
    """
    Decorator for implementing retry logic with exponential backoff for async functions.

    :param retries: int, number of retry attempts
    :param base_delay: float, base delay between retries in seconds
    :param exponential_backoff: bool, whether to use exponential backoff
    :param jitter: bool, whether to add random jitter to the delay
    :return: function, decorated function
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            for attempt in range(1, retries + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if attempt == retries:
                        logger.error(
                            f"All retry attempts failed for {func.__name__}: {str(e)}"
                        )
                        raise

                    delay = (
                        base_delay * (2 ** (attempt - 1))
                        if exponential_backoff
                        else base_delay
                    )
                    if jitter:
                        delay *= random.uniform(1.0, 1.5)

                    logger.warning(
                        f"Attempt {attempt} failed for {func.__name__}. Retrying in {delay:.2f} seconds. Error: {str(e)}"
                    )
                    await asyncio.sleep(delay)

        return wrapper
    return decorator
