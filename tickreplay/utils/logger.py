#!filepath: tickreplay/utils/logger.py
import os
import json
from functools import wraps
from time import perf_counter
from loguru import logger
from typing import Callable


class Logging:
    """
    Replay 日志模块
    ---------------------------------------
    - 按日期切割日志文件
    - 日志保留周期
    - 函数级日志装饰器（catch）
    ---------------------------------------
    """

    def __init__(
        self,
        log_dir: str = "logs",
        rotation: str = "1 day",
        retention: str = "30 days",
        log_level: str = "INFO",
    ):
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = log_level
        self._configured = False

    def _configure(self) -> None:
        """
        配置全局 logger（首次写日志时执行，只执行一次）
        """
        os.makedirs(self.log_dir, exist_ok=True)

        logger.remove()
        logger.add(
            sink=f"{self.log_dir}/{{time:YYYY-MM-DD}}.log",
            rotation=self.rotation,
            retention=self.retention,
            level=self.level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            enqueue=True,
            backtrace=True,
            diagnose=True,
        )
        self._configured = True
        logger.info("\n-----------Logger initialized successfully.-----------")

    def reconfigure(
        self,
        *,
        log_dir: str,
        rotation: str,
        retention: str,
        level: str,
    ) -> None:
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = level
        self._configure()

    def disable_file_sink(self) -> None:
        """测试 / 嵌入场景：不落盘，仅保留调用者自己挂的 sink"""
        self._configured = True

    def _ensure(self) -> None:
        if not self._configured:
            self._configure()

    # ----------- 日志方法 -----------
    def debug(self, msg: str, *args, **kwargs):
        self._ensure()
        logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._ensure()
        logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._ensure()
        logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._ensure()
        logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        self._ensure()
        logger.exception(msg, *args, **kwargs)

    # ---------- 日志装饰器 ----------
    def catch(
        self,
        msg: str = "Exception occurred",
        log_inputs: bool = False,
        log_outputs: bool = False,
        log_time: bool = True,
    ) -> Callable:

        def decorator(func: Callable):
            @wraps(func)
            def wrapper(*args, **kwargs):
                self._ensure()

                if log_inputs:
                    logger.info(
                        f"[CALL] {func.__name__} args={args}, "
                        f"kwargs={json.dumps(kwargs, ensure_ascii=False, default=str)}"
                    )

                start = perf_counter()

                try:
                    result = func(*args, **kwargs)
                except Exception:
                    logger.exception(f"[ERROR] {func.__name__}: {msg}")
                    raise

                if log_outputs:
                    logger.info(f"[RETURN] {func.__name__} result={result}")

                if log_time:
                    cost = perf_counter() - start
                    logger.info(f"[TIME] {func.__name__} took {cost:.4f}s")

                return result

            return wrapper

        return decorator


# 默认全局 logs（可被 init_logging 替换配置）
logs = Logging()


def init_logging(cfg) -> Logging:
    """
    根据 LogConfig 重新配置全局 logs
    """
    logs.reconfigure(
        log_dir=cfg.dir,
        rotation=cfg.rotation,
        retention=cfg.retention,
        level=cfg.level,
    )
    return logs
