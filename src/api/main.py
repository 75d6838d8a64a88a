"""
ライフ＆デス・チェス FastAPI サーバ
描画側（フロントエンド）とゲームエンジンをつなぐアダプタ。
ルールの判定は行わず、クリックされた座標をエンジンに渡して状態を返すだけ。
"""

import asyncio
import logging
import uuid
from typing import Callable, Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import get_settings
from ..engine import BOARD_SIZE, Game

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="ライフ＆デス・チェス API",
    description="ライフ＆デス・チェスのバックエンドAPI",
    version="1.0.0"
)

# CORS設定（フロントエンドからのアクセスを許可）
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ゲームの状態を保持する辞書
games: Dict[str, Game] = {}


def _schedule_on_loop(delay: float, callback: Callable[[], None]):
    """ターン交代の遅延実行をイベントループに登録する"""
    return asyncio.get_running_loop().call_later(delay, callback)


def _get_game(game_id: str) -> Game:
    if game_id not in games:
        raise HTTPException(status_code=404, detail="ゲームが見つかりません")
    return games[game_id]


# Pydanticモデル（リクエスト/レスポンス用）

class NewGameResponse(BaseModel):
    game_id: str
    message: str
    game_state: dict


class ClickRequest(BaseModel):
    row: int = Field(ge=0, lt=BOARD_SIZE)
    col: int = Field(ge=0, lt=BOARD_SIZE)


class ClickResponse(BaseModel):
    game_id: str
    game_state: dict


class EndTurnResponse(BaseModel):
    success: bool
    message: str
    game_state: dict


# エンドポイント

@app.get("/api")
async def root():
    """APIルート"""
    return {
        "message": "ライフ＆デス・チェス API へようこそ",
        "version": "1.0.0",
        "endpoints": [
            "/new_game",
            "/get_game/{game_id}",
            "/click/{game_id}",
            "/end_turn/{game_id}",
            "/delete_game/{game_id}",
        ]
    }


@app.post("/new_game", response_model=NewGameResponse)
async def new_game():
    """新しいゲームを開始する（白が先手）"""
    game_id = str(uuid.uuid4())
    game = Game(settings=settings, scheduler=_schedule_on_loop)
    games[game_id] = game
    logger.info("New game %s", game_id)

    return NewGameResponse(
        game_id=game_id,
        message="新しいゲームを開始しました",
        game_state=game.snapshot()
    )


@app.get("/get_game/{game_id}")
async def get_game(game_id: str):
    """ゲームの状態を取得"""
    return _get_game(game_id).snapshot()


@app.post("/click/{game_id}", response_model=ClickResponse)
async def click(game_id: str, request: ClickRequest):
    """
    マスがクリックされたことをエンジンに伝える
    ルールに合わないクリックはエラーにならず、選択解除とステータス表示で返る
    """
    game = _get_game(game_id)
    snapshot = game.on_square_activated(request.row, request.col)
    return ClickResponse(game_id=game_id, game_state=snapshot)


@app.post("/end_turn/{game_id}", response_model=EndTurnResponse)
async def end_turn(game_id: str):
    """現在のプレイヤーのターンを手動で終了する"""
    game = _get_game(game_id)
    success = game.end_turn()
    message = "ターンを終了しました" if success else "今はターンを終了できません"

    return EndTurnResponse(
        success=success,
        message=message,
        game_state=game.snapshot()
    )


@app.delete("/delete_game/{game_id}")
async def delete_game(game_id: str):
    """ゲームを削除"""
    _get_game(game_id)
    del games[game_id]
    return {"message": "ゲームを削除しました"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
