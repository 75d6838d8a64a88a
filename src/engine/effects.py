"""
生・死の効果を解決するモジュール

通り抜け効果、対消滅、キングへの威嚇（盾の剥奪）を扱う。
行動が完了するたびに Game から呼ばれる。
"""

import logging
from typing import List, Tuple

from .board import Board
from .piece import Piece, Player, PieceType
from .rules import Rules

logger = logging.getLogger(__name__)


def _is_straight_line(from_pos: Tuple[int, int], to_pos: Tuple[int, int]) -> bool:
    dr = to_pos[0] - from_pos[0]
    dc = to_pos[1] - from_pos[1]
    return dr == 0 or dc == 0 or abs(dr) == abs(dc)


class Effects:
    """生・死の効果をまとめたクラス"""

    @staticmethod
    def apply_pass_through(board: Board, moving_piece: Piece, static_piece: Piece) -> bool:
        """
        動いている駒が生・死の駒を通り抜けたときの効果を適用する

        生: 動いている駒が盾を得る
        死: 盾があれば盾を失って生き残る。盾がなければ現在のマスで破壊される

        返り値: 動いている駒が破壊されたらTrue（呼び出し側は移動を中止する）
        """
        if static_piece.piece_type == PieceType.LIFE:
            moving_piece.has_shield = True
        elif static_piece.piece_type == PieceType.DEATH:
            if moving_piece.has_shield:
                moving_piece.has_shield = False
            else:
                board.remove_piece(moving_piece)
                logger.info("%r destroyed passing through Death at %s", moving_piece, static_piece.position)
                return True
        return False

    @staticmethod
    def check_path(
        board: Board,
        piece: Piece,
        from_pos: Tuple[int, int],
        to_pos: Tuple[int, int]
    ) -> bool:
        """
        直線経路上（両端を除く）の生・死の駒の効果を順番に適用する
        直線でない移動（ナイト）には経路がないので何もしない

        返り値: 途中で破壊されたらTrue
        """
        if from_pos == to_pos or not _is_straight_line(from_pos, to_pos):
            return False

        dr = (to_pos[0] > from_pos[0]) - (to_pos[0] < from_pos[0])
        dc = (to_pos[1] > from_pos[1]) - (to_pos[1] < from_pos[1])
        r, c = from_pos[0] + dr, from_pos[1] + dc

        while (r, c) != to_pos:
            static_piece = board.get_piece(r, c)
            if static_piece is not None and static_piece.is_life_or_death:
                if Effects.apply_pass_through(board, piece, static_piece):
                    return True
            r, c = r + dr, c + dc

        return False

    @staticmethod
    def check_for_annihilation(board: Board) -> List[Piece]:
        """
        隣接（縦横斜め）する生と死の組を両方とも盤面から取り除く
        返り値: 取り除いた駒のリスト
        """
        life_death_pieces = [piece for piece in board.iter_pieces() if piece.is_life_or_death]

        to_remove: List[Piece] = []
        for i, first in enumerate(life_death_pieces):
            for second in life_death_pieces[i + 1:]:
                if first.piece_type == second.piece_type:
                    continue
                distance = max(abs(first.row - second.row), abs(first.col - second.col))
                if distance == 1:
                    for piece in (first, second):
                        if not any(piece is removed for removed in to_remove):
                            to_remove.append(piece)

        for piece in to_remove:
            board.remove_piece(piece)
        if to_remove:
            logger.info("Annihilated: %s", to_remove)
        return to_remove

    @staticmethod
    def check_for_check(board: Board) -> List[Piece]:
        """
        キングを攻撃できる敵の駒の盾を剥奪し、威嚇状態にする
        威嚇状態の駒がもうキングを攻撃していなければ盾を戻す
        免疫のある駒は剥奪の対象外

        返り値: 今回新たに盾を剥奪された駒のリスト
        """
        threatening: List[Piece] = []
        intimidated: List[Piece] = []

        for color in (Player.WHITE, Player.BLACK):
            king = board.find_king(color)
            if king is None:
                continue
            for piece in board.iter_pieces():
                if piece.owner == king.owner:
                    continue
                if not Rules.attacks_square(board, piece, king.position):
                    continue
                threatening.append(piece)
                if piece.has_shield and not piece.is_immune:
                    piece.has_shield = False
                    piece.is_intimidated = True
                    intimidated.append(piece)

        for piece in board.iter_pieces():
            if piece.is_intimidated and not any(piece is p for p in threatening):
                piece.has_shield = True
                piece.is_intimidated = False

        if intimidated:
            logger.info("Intimidated (shield stripped): %s", intimidated)
        return intimidated
