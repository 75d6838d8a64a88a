#!/usr/bin/env python
"""
ライフ＆デス・チェス 開発サーバ起動スクリプト
"""

import sys
import os

# プロジェクトルートをパスに追加
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

from src.api.main import app
from src.config import get_settings
import uvicorn

if __name__ == "__main__":
    settings = get_settings()

    print("=" * 60)
    print("ライフ＆デス・チェス 開発サーバを起動します")
    print("=" * 60)
    print(f"APIサーバ: http://localhost:{settings.port}")
    print(f"API ドキュメント: http://localhost:{settings.port}/docs")
    print("=" * 60)
    print()

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower()
    )
