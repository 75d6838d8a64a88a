"""
ライフ＆デス・チェスの盤面を管理するモジュール
"""

from typing import Iterator, List, Optional, Tuple

from .piece import Piece, Player, PieceType

# 盤面サイズ
BOARD_SIZE = 10


def is_light_square(row: int, col: int) -> bool:
    """明るいマス（生の駒が動けるマス）か確認"""
    return (row + col) % 2 == 1


def is_dark_square(row: int, col: int) -> bool:
    """暗いマス（死の駒が動けるマス）か確認"""
    return (row + col) % 2 == 0


class Board:
    """
    10x10のゲームボードを表すクラス

    各マスは駒を最大1つ保持する。盤面の変更はすべてこのクラスのメソッドを通して行い、
    駒の (row, col) と盤面上の位置が常に一致するようにする。
    """

    def __init__(self):
        self.squares: List[List[Optional[Piece]]] = [
            [None for _ in range(BOARD_SIZE)]
            for _ in range(BOARD_SIZE)
        ]

    def is_valid_position(self, row: int, col: int) -> bool:
        """位置が盤面内か確認"""
        return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE

    def get_piece(self, row: int, col: int) -> Optional[Piece]:
        """指定位置の駒を取得（盤外はNone）"""
        if not self.is_valid_position(row, col):
            return None
        return self.squares[row][col]

    def is_occupied(self, row: int, col: int) -> bool:
        return self.get_piece(row, col) is not None

    def place_piece(self, piece: Piece, row: int, col: int) -> bool:
        """
        空きマスに駒を置く
        返り値: 成功したらTrue（盤外や駒があるマスはFalse）
        """
        if not self.is_valid_position(row, col):
            return False
        if self.squares[row][col] is not None:
            return False
        self.squares[row][col] = piece
        piece.row = row
        piece.col = col
        return True

    def clear_square(self, row: int, col: int) -> Optional[Piece]:
        """指定位置を空にして、置かれていた駒を返す"""
        if not self.is_valid_position(row, col):
            return None
        piece = self.squares[row][col]
        self.squares[row][col] = None
        return piece

    def remove_piece(self, piece: Piece) -> bool:
        """駒を盤面から取り除く（その駒が現在のマスに置かれている場合のみ）"""
        if self.get_piece(piece.row, piece.col) is not piece:
            return False
        self.squares[piece.row][piece.col] = None
        return True

    def move_piece(self, piece: Piece, row: int, col: int) -> bool:
        """
        駒を移動する
        元のマスを空にしてから移動先に書き込む
        返り値: 成功したらTrue
        """
        if not self.is_valid_position(row, col):
            return False
        if (row, col) == piece.position:
            return True
        if self.squares[row][col] is not None:
            return False

        self.remove_piece(piece)
        self.squares[row][col] = piece
        piece.row = row
        piece.col = col
        return True

    def iter_pieces(self) -> Iterator[Piece]:
        """盤上の全ての駒を行優先で返す"""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = self.squares[row][col]
                if piece is not None:
                    yield piece

    def get_pieces(self, owner: Optional[Player] = None) -> List[Piece]:
        """盤上の駒のリストを取得（ownerを指定するとその所有者の駒のみ）"""
        return [
            piece for piece in self.iter_pieces()
            if owner is None or piece.owner == owner
        ]

    def find_king(self, color: Player) -> Optional[Piece]:
        """指定した色のキングを探す"""
        for piece in self.iter_pieces():
            if piece.piece_type == PieceType.KING and piece.color == color:
                return piece
        return None

    def copy(self) -> 'Board':
        """盤面のコピーを作成（駒の状態も複製する）"""
        new_board = Board()
        for piece in self.iter_pieces():
            new_piece = Piece(piece.piece_type, piece.color)
            new_piece.has_shield = piece.has_shield
            new_piece.has_moved = piece.has_moved
            new_piece.is_immune = piece.is_immune
            new_piece.is_intimidated = piece.is_intimidated
            new_board.place_piece(new_piece, piece.row, piece.col)
        return new_board

    def __str__(self):
        """盤面の文字列表現を返す"""
        cell_width = 4
        separator_length = BOARD_SIZE * (cell_width + 1) + 1

        result = []

        header = "    "
        for i in range(BOARD_SIZE):
            header += f"{i:^{cell_width}}|"
        result.append(header)
        result.append("   " + "-" * separator_length)

        for row in range(BOARD_SIZE):
            row_str = f"{row:>2} |"
            for col in range(BOARD_SIZE):
                piece = self.squares[row][col]
                if piece is None:
                    row_str += " " * cell_width + "|"
                else:
                    mark = str(piece) + ("+" if piece.has_shield else "")
                    row_str += f"{mark:^{cell_width}}|"
            result.append(row_str)
            result.append("   " + "-" * separator_length)

        return "\n".join(result)

    def to_dict(self) -> dict:
        """盤面を辞書形式に変換（API用）"""
        return {
            "size": BOARD_SIZE,
            "squares": [
                [piece.to_dict() if piece else None for piece in row]
                for row in self.squares
            ],
        }
