"""
駒の動きのルール判定を行うモジュール

各駒の行動候補は盤面から毎回計算する（盤面は行動のたびに変わるのでキャッシュしない）。
ここにある関数は盤面や駒を変更しない。
"""

from typing import Callable, Dict, List, Tuple

from .board import Board, is_dark_square, is_light_square
from .piece import Piece, Player, PieceType
from .move import Action, ActionSlot, PossibleActions

ORTHOGONAL_DIRECTIONS = [(0, 1), (0, -1), (1, 0), (-1, 0)]
DIAGONAL_DIRECTIONS = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
ALL_DIRECTIONS = ORTHOGONAL_DIRECTIONS + DIAGONAL_DIRECTIONS

KNIGHT_OFFSETS = [(-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1)]

# ナイトの踏み台にできない駒
NON_RAMP_TYPES = (PieceType.LIFE, PieceType.DEATH, PieceType.KING)

# 自分の通常の移動で待機マスへ向かう駒
STEPPING_TYPES = (PieceType.KING, PieceType.PAWN)

# ポーンの進行方向と初期位置の行
PAWN_DIRECTIONS = {Player.WHITE: -1, Player.BLACK: 1}
PAWN_START_ROWS = {Player.WHITE: 8, Player.BLACK: 1}


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _is_enemy_target(piece: Piece, target: Piece) -> bool:
    """攻撃対象になれる敵の駒か（生・死は攻撃できない）"""
    return target.owner != piece.owner and not target.is_life_or_death


def _pawn_actions(board: Board, pawn: Piece) -> PossibleActions:
    """
    ポーンの行動候補
    - 前に1マス（空きマスのみ）
    - 初期位置からは2マスまたは3マス前進（途中のマスが全て空）
    - 斜め前の敵の駒を攻撃
    - 目の前の敵陣の生・死を飛び越える特殊ジャンプ
    """
    row, col = pawn.position
    direction = PAWN_DIRECTIONS[pawn.color]
    moves = []
    attacks = []

    one_step = (row + direction, col)
    two_steps = (row + 2 * direction, col)
    three_steps = (row + 3 * direction, col)

    one_step_open = board.is_valid_position(*one_step) and not board.is_occupied(*one_step)
    if one_step_open:
        moves.append(Action.create_move(pawn.position, one_step))

        if not pawn.has_moved and row == PAWN_START_ROWS[pawn.color]:
            if board.is_valid_position(*two_steps) and not board.is_occupied(*two_steps):
                moves.append(Action.create_move(pawn.position, two_steps))
                if board.is_valid_position(*three_steps) and not board.is_occupied(*three_steps):
                    moves.append(Action.create_move(pawn.position, three_steps))

    for dc in (-1, 1):
        target = board.get_piece(row + direction, col + dc)
        if target and _is_enemy_target(pawn, target):
            attacks.append(Action.create_attack(pawn.position, target.position))

    # 特殊ジャンプ: 目の前に敵陣の生・死があり、その先が空きマス
    blocker = board.get_piece(*one_step)
    if blocker and blocker.is_life_or_death and blocker.owner != pawn.owner:
        if board.is_valid_position(*two_steps) and not board.is_occupied(*two_steps):
            moves.append(Action.create_special_jump(pawn.position, two_steps, blocker))

    return PossibleActions(moves=moves, attacks=attacks)


def _sliding_actions(
    board: Board,
    piece: Piece,
    directions: List[Tuple[int, int]]
) -> PossibleActions:
    """
    直線方向に滑る駒（ルーク・ビショップ・クイーン）の行動候補
    生・死の駒は通り抜ける（止まることはできない）。
    最初にぶつかった通常の駒で止まり、敵の駒なら攻撃候補にする。
    """
    row, col = piece.position
    moves = []
    attacks = []

    for dr, dc in directions:
        r, c = row + dr, col + dc
        while board.is_valid_position(r, c):
            target = board.get_piece(r, c)
            if target is None:
                moves.append(Action.create_move(piece.position, (r, c)))
            elif target.is_life_or_death:
                pass  # 通り抜け
            else:
                if target.owner != piece.owner:
                    attacks.append(Action.create_attack(piece.position, (r, c)))
                break
            r, c = r + dr, c + dc

    return PossibleActions(moves=moves, attacks=attacks)


def _rook_actions(board: Board, piece: Piece) -> PossibleActions:
    return _sliding_actions(board, piece, ORTHOGONAL_DIRECTIONS)


def _bishop_actions(board: Board, piece: Piece) -> PossibleActions:
    return _sliding_actions(board, piece, DIAGONAL_DIRECTIONS)


def _queen_actions(board: Board, piece: Piece) -> PossibleActions:
    return _sliding_actions(board, piece, ORTHOGONAL_DIRECTIONS + DIAGONAL_DIRECTIONS)


def _king_actions(board: Board, king: Piece) -> PossibleActions:
    """キングの行動候補（周囲8マス）"""
    row, col = king.position
    moves = []
    attacks = []

    for dr, dc in ALL_DIRECTIONS:
        r, c = row + dr, col + dc
        if not board.is_valid_position(r, c):
            continue
        target = board.get_piece(r, c)
        if target is None:
            moves.append(Action.create_move(king.position, (r, c)))
        elif _is_enemy_target(king, target):
            attacks.append(Action.create_attack(king.position, (r, c)))

    return PossibleActions(moves=moves, attacks=attacks)


def _single_ramp_jumps(board: Board, start: Tuple[int, int]) -> List[Tuple[int, int]]:
    """
    指定位置から1回の踏み台ジャンプで着地できるマス
    隣のマスに生・死・キング以外の駒があり、同じ方向にもう1マス先が空いていれば跳べる
    """
    row, col = start
    landings = []

    for dr, dc in ALL_DIRECTIONS:
        ramp = board.get_piece(row + dr, col + dc)
        if ramp is None or ramp.piece_type in NON_RAMP_TYPES:
            continue
        land = (row + 2 * dr, col + 2 * dc)
        if board.is_valid_position(*land) and not board.is_occupied(*land):
            landings.append(land)

    return landings


def _knight_actions(board: Board, knight: Piece) -> PossibleActions:
    """
    ナイトの行動候補
    - 通常のL字移動・攻撃
    - 踏み台ジャンプ（最大2回連続、2回目で元の位置には戻れない）
    """
    row, col = knight.position
    moves = []
    attacks = []

    for dr, dc in KNIGHT_OFFSETS:
        r, c = row + dr, col + dc
        if not board.is_valid_position(r, c):
            continue
        target = board.get_piece(r, c)
        if target is None:
            moves.append(Action.create_move(knight.position, (r, c)))
        elif _is_enemy_target(knight, target):
            attacks.append(Action.create_attack(knight.position, (r, c)))

    # 挿入順を保つためにdictを使う
    ramp_destinations: Dict[Tuple[int, int], None] = {}
    first_jumps = _single_ramp_jumps(board, knight.position)
    for landing in first_jumps:
        ramp_destinations[landing] = None
    for landing in first_jumps:
        for second in _single_ramp_jumps(board, landing):
            if second != knight.position:
                ramp_destinations[second] = None

    existing = set(action.to_pos for action in moves)
    for landing in ramp_destinations:
        if landing not in existing:
            moves.append(Action.create_ramp_jump(knight.position, landing))

    return PossibleActions(moves=moves, attacks=attacks)


def _life_actions(board: Board, life: Piece) -> PossibleActions:
    """
    生の行動候補
    - 明るいマスへの斜め1マス移動
    - 隣接する（明るいマスの）盾のない味方を回復
    """
    row, col = life.position
    moves = []
    special_actions = []

    for dr, dc in DIAGONAL_DIRECTIONS:
        r, c = row + dr, col + dc
        if not board.is_valid_position(r, c) or not is_light_square(r, c):
            continue
        target = board.get_piece(r, c)
        if target is None:
            moves.append(Action.create_move(life.position, (r, c)))
        elif target.owner == life.owner and not target.has_shield:
            special_actions.append(Action.create_heal(life.position, (r, c)))

    return PossibleActions(moves=moves, special_actions=special_actions)


def _death_actions(board: Board, death: Piece) -> PossibleActions:
    """
    死の行動候補
    - 暗いマスへの斜め1マス移動
    - 隣接する（暗いマスの）守られていない駒を即死させる（敵味方問わず）
    """
    row, col = death.position
    moves = []
    special_actions = []

    for dr, dc in DIAGONAL_DIRECTIONS:
        r, c = row + dr, col + dc
        if not board.is_valid_position(r, c) or not is_dark_square(r, c):
            continue
        target = board.get_piece(r, c)
        if target is None:
            moves.append(Action.create_move(death.position, (r, c)))
        elif not target.is_immune and not Rules.is_protected(board, target):
            special_actions.append(Action.create_kill(death.position, (r, c)))

    return PossibleActions(moves=moves, special_actions=special_actions)


# 駒の種類ごとの行動候補生成関数
ACTION_GENERATORS: Dict[PieceType, Callable[[Board, Piece], PossibleActions]] = {
    PieceType.PAWN: _pawn_actions,
    PieceType.ROOK: _rook_actions,
    PieceType.KNIGHT: _knight_actions,
    PieceType.BISHOP: _bishop_actions,
    PieceType.QUEEN: _queen_actions,
    PieceType.KING: _king_actions,
    PieceType.LIFE: _life_actions,
    PieceType.DEATH: _death_actions,
}


class Rules:
    """ライフ＆デス・チェスのルールを管理するクラス"""

    @staticmethod
    def get_possible_actions(board: Board, piece: Piece) -> PossibleActions:
        """駒の行動候補（移動・攻撃・特殊行動）を取得"""
        return ACTION_GENERATORS[piece.piece_type](board, piece)

    @staticmethod
    def is_protected(board: Board, piece: Piece) -> bool:
        """
        駒が守られているか確認
        上下左右の隣接マスに同じ所有者の駒があれば守られている
        """
        for dr, dc in ORTHOGONAL_DIRECTIONS:
            neighbour = board.get_piece(piece.row + dr, piece.col + dc)
            if neighbour is not None and neighbour is not piece and neighbour.owner == piece.owner:
                return True
        return False

    @staticmethod
    def get_staging_squares(board: Board, attacker: Piece, target: Piece) -> List[Tuple[int, int]]:
        """
        攻撃の待機マスを取得

        ナイト: 目標に隣接する空きマスのうち、L字移動で到達できるマス
        キング・ポーン: 目標に隣接する空きマスのうち、通常の移動で到達できるマス
        その他: 攻撃方向に沿って目標の直前のマス。攻撃側が既に隣接していればその場。
        """
        if attacker.piece_type == PieceType.KNIGHT:
            staging = []
            for dr, dc in ALL_DIRECTIONS:
                r, c = target.row + dr, target.col + dc
                if not board.is_valid_position(r, c) or board.is_occupied(r, c):
                    continue
                if (r - attacker.row, c - attacker.col) in KNIGHT_OFFSETS:
                    staging.append((r, c))
            return staging

        if attacker.piece_type in STEPPING_TYPES:
            # ポーンの特殊ジャンプは通常の移動ではない
            reachable = set(
                action.to_pos
                for action in Rules.get_possible_actions(board, attacker).moves
                if not action.is_special_jump
            )
            return [
                (target.row + dr, target.col + dc)
                for dr, dc in ALL_DIRECTIONS
                if (target.row + dr, target.col + dc) in reachable
            ]

        dr = _sign(target.row - attacker.row)
        dc = _sign(target.col - attacker.col)
        square = (target.row - dr, target.col - dc)

        if square == attacker.position:
            return [square]
        if board.is_valid_position(*square) and not board.is_occupied(*square):
            return [square]
        return []

    @staticmethod
    def player_has_actions(board: Board, player: Player, slot: ActionSlot) -> bool:
        """
        指定プレイヤーが指定の行動枠で行える行動があるか確認
        STANDARD: 通常の駒の移動・攻撃、または生・死の特殊行動
        SPECIAL: 生・死の移動
        待機マスのない攻撃は行動として数えない
        """
        for piece in board.get_pieces(player):
            actions = Rules.get_possible_actions(board, piece)
            if slot == ActionSlot.STANDARD:
                if piece.is_standard:
                    if actions.moves:
                        return True
                    for attack in actions.attacks:
                        target = board.get_piece(*attack.to_pos)
                        if Rules.get_staging_squares(board, piece, target):
                            return True
                elif actions.special_actions:
                    return True
            elif piece.is_life_or_death and actions.moves:
                return True
        return False

    @staticmethod
    def attacks_square(board: Board, piece: Piece, square: Tuple[int, int]) -> bool:
        """駒の現在の攻撃候補に指定マスが含まれるか確認"""
        return square in Rules.get_possible_actions(board, piece).attack_targets()
