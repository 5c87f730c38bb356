"""
URL列表读取服务
"""
import os
import logging
from typing import Iterable, Iterator, List

COMMENT_MARKER = '#'


class URLSource:
    """从文本流或环境变量读取要检查的URL"""

    def __init__(self, env_var_name: str = "URLS"):
        """
        初始化URL来源

        Args:
            env_var_name: 环境变量名称，默认为"URLS"
        """
        self.env_var_name = env_var_name
        self.logger = logging.getLogger(__name__)

    def read_lines(self, stream: Iterable[str]) -> Iterator[str]:
        """
        逐行读取URL，跳过空行和以 # 开头的注释行

        Args:
            stream: 文本流，每行一个URL

        Yields:
            str: 去除首尾空白后的URL
        """
        for line in stream:
            if self.is_ignored(line):
                continue
            yield line.strip()

    def get_urls_from_env(self) -> List[str]:
        """
        从环境变量获取URL列表（逗号分隔）

        Returns:
            List[str]: URL列表
        """
        urls_str = os.getenv(self.env_var_name, "")

        if not urls_str.strip():
            self.logger.warning(f"环境变量 {self.env_var_name} 为空")
            return []

        urls = list(self.read_lines(urls_str.split(',')))
        self.logger.info(f"成功加载 {len(urls)} 个URL")
        return urls

    @staticmethod
    def is_ignored(line: str) -> bool:
        """空行和注释行不参与检查"""
        stripped = line.strip()
        return not stripped or stripped.startswith(COMMENT_MARKER)
