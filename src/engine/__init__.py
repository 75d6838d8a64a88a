"""
ライフ＆デス・チェスのゲームエンジン - パッケージ初期化
"""

from .piece import Piece, Player, PieceType, PIECE_NAMES, PIECE_SYMBOLS
from .board import Board, BOARD_SIZE, is_light_square, is_dark_square
from .move import Action, ActionType, ActionSlot, PossibleActions
from .rules import Rules
from .effects import Effects
from .errors import EngineError, InvalidCoordinate, IllegalAction, NoStagingAvailable
from .game import Game, Phase, TurnState

__all__ = [
    'Piece',
    'Player',
    'PieceType',
    'PIECE_NAMES',
    'PIECE_SYMBOLS',
    'Board',
    'BOARD_SIZE',
    'is_light_square',
    'is_dark_square',
    'Action',
    'ActionType',
    'ActionSlot',
    'PossibleActions',
    'Rules',
    'Effects',
    'EngineError',
    'InvalidCoordinate',
    'IllegalAction',
    'NoStagingAvailable',
    'Game',
    'Phase',
    'TurnState',
]
