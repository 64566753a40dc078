"""
Web 진입점

실행 방법:
    python -m web [--host 127.0.0.1] [--port 3000] [--reload]

OAuth redirect_uri(secrets.yaml)의 host/port와 일치해야 콜백이 도착한다.
"""

import argparse

import uvicorn

from core.constants import Defaults


def parse_args() -> argparse.Namespace:
    """서버 실행 인자"""
    parser = argparse.ArgumentParser(
        prog="python -m web",
        description="Hedera QBO Sync API 서버",
    )
    parser.add_argument("--host", default=Defaults.WEB_HOST, help="바인딩 주소")
    parser.add_argument("--port", type=int, default=Defaults.WEB_PORT, help="포트 (기본: 3000)")
    parser.add_argument("--reload", action="store_true", help="코드 변경 시 자동 재시작 (개발용)")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    uvicorn.run(
        "web.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
