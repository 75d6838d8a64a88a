"""
初期盤面の設定とユーティリティ
"""

from typing import List, Tuple

from .board import Board, BOARD_SIZE
from .piece import Piece, Player, PieceType

# 後列の並び（1-8列目）
BACK_RANK = [
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
]

# 各プレイヤーの後列・ポーン列の行番号
BACK_ROWS = {Player.WHITE: 9, Player.BLACK: 0}
PAWN_ROWS = {Player.WHITE: 8, Player.BLACK: 1}


def _initial_setup(player: Player) -> List[Tuple[int, int, PieceType]]:
    """指定プレイヤーの初期配置 (row, col, 駒の種類) のリストを返す"""
    back_row = BACK_ROWS[player]
    pawn_row = PAWN_ROWS[player]

    # 生は明るいマス、死は暗いマスの角に置く
    if player == Player.WHITE:
        corners = [(back_row, 0, PieceType.LIFE), (back_row, BOARD_SIZE - 1, PieceType.DEATH)]
    else:
        corners = [(back_row, 0, PieceType.DEATH), (back_row, BOARD_SIZE - 1, PieceType.LIFE)]

    setup = list(corners)
    for i, piece_type in enumerate(BACK_RANK):
        setup.append((back_row, i + 1, piece_type))
    for col in range(BOARD_SIZE):
        setup.append((pawn_row, col, PieceType.PAWN))
    return setup


def load_initial_board() -> Board:
    """
    初期盤面を作成する
    白: 8-9行（下側）、黒: 0-1行（上側）
    """
    board = Board()

    for player in (Player.BLACK, Player.WHITE):
        for row, col, piece_type in _initial_setup(player):
            board.place_piece(Piece(piece_type, player), row, col)

    return board


def format_position(row: int, col: int) -> str:
    """
    盤面の位置を文字列に変換
    0行目が10段目、9行目が1段目
    例: (0, 0) -> "a10", (9, 9) -> "j1"
    """
    col_char = chr(ord('a') + col)
    rank = BOARD_SIZE - row
    return f"{col_char}{rank}"
