"""
로깅 설정 모듈
booth_admin 로거에 스트림 핸들러 하나만 연결한다
"""

import logging

LOGGER_NAME = "booth_admin"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """애플리케이션 로깅 설정 (여러 번 호출해도 핸들러는 하나)"""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """모듈별 하위 로거 반환"""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
