# app/main.py  (엔트리포인트)
from dotenv import load_dotenv

# 루트 .env 로딩 (settings/engine이 import 시점에 환경변수를 읽으므로 가장 먼저)
load_dotenv()

from app.backend.main import app as app  # noqa: E402
