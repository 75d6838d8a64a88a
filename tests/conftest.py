"""
pytest共通設定とフィクスチャ
"""

import pytest
import sys
from pathlib import Path

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def empty_board():
    """空の盤面を提供するフィクスチャ"""
    from src.engine import Board
    return Board()


@pytest.fixture
def initial_board():
    """初期配置の盤面を提供するフィクスチャ"""
    from src.engine.initial_setup import load_initial_board
    return load_initial_board()


@pytest.fixture
def settings():
    """環境変数に依存しない既定の設定"""
    from src.config import Settings
    return Settings(turn_switch_delay=0.0, auto_single_staging=False)


@pytest.fixture
def place():
    """盤面に駒を置くヘルパーを提供するフィクスチャ"""
    from src.engine import Piece

    def _place(board, piece_type, color, row, col, **state):
        piece = Piece(piece_type, color)
        for name, value in state.items():
            setattr(piece, name, value)
        assert board.place_piece(piece, row, col), f"({row}, {col})に駒を置けませんでした"
        return piece

    return _place


@pytest.fixture
def make_game(settings):
    """任意の盤面からゲームを作るフィクスチャ"""
    from src.engine import Game, Player

    def _make_game(board=None, current_player=Player.WHITE, **overrides):
        game_settings = settings.model_copy(update=overrides) if overrides else settings
        return Game(board=board, settings=game_settings, current_player=current_player)

    return _make_game
