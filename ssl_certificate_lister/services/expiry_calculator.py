"""
证书过期计算服务
"""
import math
from datetime import datetime, timezone
from typing import Optional

from ..interfaces import ExpiryClassifierInterface

HOURS_PER_DAY = 24
HOURS_PER_WEEK = HOURS_PER_DAY * 7
HOURS_PER_YEAR = HOURS_PER_WEEK * 52


class ExpiryCalculator(ExpiryClassifierInterface):
    """证书过期计算器"""

    def hours_until_expiry(self, expiry: datetime, now: Optional[datetime] = None) -> int:
        """
        计算距离过期的小时数（向下取整）

        Args:
            expiry: 过期时间
            now: 当前时间，默认为UTC当前时间

        Returns:
            int: 剩余小时数（负数表示已过期）
        """
        if now is None:
            now = datetime.now(timezone.utc)
        return math.floor((expiry - now).total_seconds() / 3600)

    def classify(self, expiry: datetime, now: Optional[datetime] = None) -> str:
        """
        将剩余时间转换为小时、天、周或年，向下取整

        Args:
            expiry: 过期时间
            now: 当前时间，默认为UTC当前时间

        Returns:
            str: 如 "<1h"、"5h"、"3d"、"10w"、"2y" 或 "expired"
        """
        hours = self.hours_until_expiry(expiry, now)

        if hours < 0:
            # 握手验证会拒绝已过期的证书，正常流程不会到这里
            return "expired"
        if hours < 1:
            return "<1h"
        if hours <= HOURS_PER_DAY:
            return f"{hours}h"
        if hours <= HOURS_PER_WEEK:
            return f"{hours // HOURS_PER_DAY}d"
        if hours <= HOURS_PER_YEAR:
            return f"{hours // HOURS_PER_WEEK}w"
        return f"{hours // HOURS_PER_YEAR}y"
