import logging
import re
import sys

# header.payload.signature 형태의 JWT
_JWT_RE = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]+")


class RedactTokensFilter(logging.Filter):
    """Masks JWTs that end up in log messages (cookies, headers, exception text)."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "eyJ" in message:
            record.msg = _JWT_RE.sub("[redacted-jwt]", message)
            record.args = None
        return True


def setup_logging(level: int | str = logging.INFO) -> None:
    logger = logging.getLogger()
    if logger.handlers:
        return  # 중복 설정 방지
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s - %(message)s"
    ))
    h.addFilter(RedactTokensFilter())
    logger.addHandler(h)
    # SQL 문장 로그는 끈다
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
