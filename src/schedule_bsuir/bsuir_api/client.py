import asyncio
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp

from schedule_bsuir.config import get_settings
from schedule_bsuir.services.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

_session: Optional[aiohttp.ClientSession] = None


async def _get_session() -> aiohttp.ClientSession:
    global _session
    if _session is None or _session.closed:
        timeout = aiohttp.ClientTimeout(total=get_settings().HTTP_TIMEOUT)
        _session = aiohttp.ClientSession(timeout=timeout)
    return _session


async def fetch_group_schedule(group_number: str) -> Dict[str, Any]:
    """
    Сырой ответ внешнего API по группе.
    404 означает, что расписания для группы нет, это не ошибка.
    """
    url = get_settings().SCHEDULE_API_URL.format(group=quote(group_number, safe=""))
    session = await _get_session()
    try:
        async with session.get(url) as response:
            if response.status == 404:
                logger.info(f"Внешний API: расписание группы {group_number} не найдено")
                return {}
            response.raise_for_status()
            if "application/json" not in response.headers.get("Content-Type", ""):
                text = await response.text()
                raise UpstreamUnavailable(f"Expected JSON, got: {text[:200]}")
            return await response.json()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.warning(f"Ошибка запроса к внешнему API для группы {group_number}: {e!r}")
        raise UpstreamUnavailable(f"Schedule API request failed: {e!r}") from e
    except ValueError as e:
        logger.warning(f"Внешний API вернул некорректный JSON для группы {group_number}: {e}")
        raise UpstreamUnavailable(f"Schedule API returned invalid JSON: {e}") from e


async def close():
    global _session
    if _session and not _session.closed:
        await _session.close()
        _session = None
