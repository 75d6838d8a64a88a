"""
ライフ＆デス・チェスの駒の種類と状態を定義するモジュール
"""

from enum import Enum, auto
from typing import Tuple


class Player(Enum):
    """プレイヤーの定義"""
    WHITE = 0  # 先手（白・下側）
    BLACK = 1  # 後手（黒・上側）

    @property
    def opponent(self):
        """相手プレイヤーを返す"""
        return Player.BLACK if self == Player.WHITE else Player.WHITE


class PieceType(Enum):
    """駒の種類"""
    PAWN = auto()    # ポーン
    ROOK = auto()    # ルーク
    KNIGHT = auto()  # ナイト（踏み台ジャンプ可能）
    BISHOP = auto()  # ビショップ
    QUEEN = auto()   # クイーン
    KING = auto()    # キング
    LIFE = auto()    # 生 - 回復・盾付与
    DEATH = auto()   # 死 - 即死攻撃


# 盾を持たずに生まれる駒
UNSHIELDED_TYPES = (PieceType.KING, PieceType.LIFE, PieceType.DEATH)

# 白の陣地の先頭行（この行以降は白の陣地）
WHITE_HALF_START_ROW = 5

# 中立駒（陣地によって所有者が決まる）
LIFE_DEATH_TYPES = (PieceType.LIFE, PieceType.DEATH)

# 駒の表示名
PIECE_NAMES = {
    PieceType.PAWN: "ポーン",
    PieceType.ROOK: "ルーク",
    PieceType.KNIGHT: "ナイト",
    PieceType.BISHOP: "ビショップ",
    PieceType.QUEEN: "クイーン",
    PieceType.KING: "キング",
    PieceType.LIFE: "生",
    PieceType.DEATH: "死",
}

# 駒の記号（テキスト描画用）
PIECE_SYMBOLS = {
    Player.WHITE: {
        PieceType.KING: "♔", PieceType.QUEEN: "♕", PieceType.ROOK: "♖",
        PieceType.BISHOP: "♗", PieceType.KNIGHT: "♘", PieceType.PAWN: "♙",
        PieceType.LIFE: "♥", PieceType.DEATH: "†",
    },
    Player.BLACK: {
        PieceType.KING: "♚", PieceType.QUEEN: "♛", PieceType.ROOK: "♜",
        PieceType.BISHOP: "♝", PieceType.KNIGHT: "♞", PieceType.PAWN: "♟",
        PieceType.LIFE: "♥", PieceType.DEATH: "†",
    },
}


class Piece:
    """
    盤上の駒を表すクラス

    駒は同一性を持つ（同じ種類・色の駒でも別オブジェクト）。
    row, col は Board を通してのみ更新する。
    """

    def __init__(self, piece_type: PieceType, color: Player, row: int = -1, col: int = -1):
        self.piece_type = piece_type
        self.color = color
        self.row = row
        self.col = col
        self.has_shield = piece_type not in UNSHIELDED_TYPES
        self.has_moved = False
        self.is_immune = False       # 回復で付与、持ち主の次のターン開始で解除
        self.is_intimidated = False  # キングへの威嚇で盾を失っている

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    @property
    def is_life_or_death(self) -> bool:
        return self.piece_type in LIFE_DEATH_TYPES

    @property
    def is_standard(self) -> bool:
        return not self.is_life_or_death

    @property
    def owner(self) -> Player:
        """
        駒の所有者
        通常の駒は色がそのまま所有者。
        生・死の駒は盤のどちら側にいるかで決まる（5-9行: 白、0-4行: 黒）。
        """
        if self.is_life_or_death:
            return Player.WHITE if self.row >= WHITE_HALF_START_ROW else Player.BLACK
        return self.color

    @property
    def symbol(self) -> str:
        return PIECE_SYMBOLS[self.color][self.piece_type]

    @property
    def name(self) -> str:
        return PIECE_NAMES[self.piece_type]

    def __str__(self):
        """駒の文字列表現（例: 'w♖', 'b†'）"""
        prefix = 'w' if self.color == Player.WHITE else 'b'
        return f"{prefix}{self.symbol}"

    def __repr__(self):
        return f"Piece({self.piece_type.name}, {self.color.name}, ({self.row}, {self.col}))"

    def to_dict(self) -> dict:
        """駒を辞書形式に変換（API用）"""
        return {
            "type": self.piece_type.name,
            "color": self.color.name,
            "owner": self.owner.name,
            "row": self.row,
            "col": self.col,
            "symbol": self.symbol,
            "has_shield": self.has_shield,
            "has_moved": self.has_moved,
            "is_immune": self.is_immune,
            "is_intimidated": self.is_intimidated,
        }
