"""
ターンとフェーズの状態機械

盤面・ターンの行動枠・フェーズを所有し、クリックされたマスを唯一の入力として
駒の選択 → 対象の選択 → 待機マス → 休息マス の手順を進める。
1クリックの処理（効果の連鎖を含む）が終わるまで次の入力は受け付けない。
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..config import Settings, get_settings
from .board import Board
from .effects import Effects
from .errors import EngineError, IllegalAction, InvalidCoordinate, NoStagingAvailable
from .initial_setup import format_position, load_initial_board
from .move import Action, ActionSlot, ActionType
from .piece import Piece, Player, PieceType
from .rules import Rules

logger = logging.getLogger(__name__)

# 描画側に状態のスナップショットを渡すコールバック
Renderer = Callable[[dict], None]
# (遅延秒数, コールバック) を受け取って遅延実行する関数
Scheduler = Callable[[float, Callable[[], None]], object]

PLAYER_NAMES = {
    Player.WHITE: "白",
    Player.BLACK: "黒",
}

STATUS_SELECT_PIECE = "動かす駒を選択してください。"


class Phase(Enum):
    """入力待ちのフェーズ"""
    SELECT_PIECE = "SELECT_PIECE"
    SELECT_TARGET = "SELECT_TARGET"
    SELECT_STAGING = "SELECT_STAGING"
    SELECT_RESTING = "SELECT_RESTING"


class TurnState:
    """現在の手番と、このターンに使った行動枠"""

    def __init__(self, current_player: Player = Player.WHITE):
        self.current_player = current_player
        self.standard_move_made = False
        self.special_move_made = False

    def use(self, slot: ActionSlot):
        if slot == ActionSlot.STANDARD:
            self.standard_move_made = True
        else:
            self.special_move_made = True

    def is_used(self, slot: ActionSlot) -> bool:
        if slot == ActionSlot.STANDARD:
            return self.standard_move_made
        return self.special_move_made

    def switch(self):
        """手番を交代し、行動枠をリセット"""
        self.current_player = self.current_player.opponent
        self.standard_move_made = False
        self.special_move_made = False

    def to_dict(self) -> dict:
        return {
            "current_player": self.current_player.name,
            "standard_move_made": self.standard_move_made,
            "special_move_made": self.special_move_made,
        }


class AttackInfo:
    """進行中の攻撃（攻撃側・目標・待機マス）"""

    def __init__(
        self,
        attacker: Piece,
        target: Optional[Piece] = None,
        staging: Optional[Tuple[int, int]] = None
    ):
        self.attacker = attacker
        self.target = target
        self.staging = staging


def _find_action(actions: List[Action], row: int, col: int) -> Optional[Action]:
    for action in actions:
        if action.to_pos == (row, col):
            return action
    return None


class Game:
    """ライフ＆デス・チェスのゲーム進行を管理するクラス"""

    def __init__(
        self,
        board: Optional[Board] = None,
        settings: Optional[Settings] = None,
        renderer: Optional[Renderer] = None,
        scheduler: Optional[Scheduler] = None,
        current_player: Player = Player.WHITE
    ):
        self.board = board if board is not None else load_initial_board()
        self.settings = settings if settings is not None else get_settings()
        self.renderer = renderer
        self.scheduler = scheduler
        self.turn = TurnState(current_player)
        self.pending_turn_switch = False

        self._reset_selection()
        self.status = f"{PLAYER_NAMES[current_player]}の番です。{STATUS_SELECT_PIECE}"
        if not self._has_remaining_action():
            # 開始時点で行動できなければ相手に手番を渡す
            self._switch_turn()
        self._notify()

    @property
    def current_player(self) -> Player:
        return self.turn.current_player

    # ------------------------------------------------------------------
    # 入力
    # ------------------------------------------------------------------

    def handle_click(self, row: int, col: int) -> dict:
        """
        クリックされたマスを処理する（唯一の変更の入口）
        返り値: 処理後の状態のスナップショット
        """
        if self.pending_turn_switch:
            logger.info("Click at (%s, %s) ignored while turn switch is pending", row, col)
            return self.snapshot()

        handlers = {
            Phase.SELECT_PIECE: self._handle_select_piece,
            Phase.SELECT_TARGET: self._handle_select_target,
            Phase.SELECT_STAGING: self._handle_select_staging,
            Phase.SELECT_RESTING: self._handle_select_resting,
        }

        try:
            if not self.board.is_valid_position(row, col):
                raise InvalidCoordinate(row, col)
            handlers[self.phase](row, col)
        except EngineError as e:
            logger.info("Rejected click at (%s, %s) in %s: %s", row, col, self.phase.name, e.code)
            self.deselect()
            self.status = e.message

        self._notify()
        return self.snapshot()

    on_square_activated = handle_click

    def _handle_select_piece(self, row: int, col: int):
        piece = self.board.get_piece(row, col)
        if piece is None or piece.owner != self.current_player:
            raise IllegalAction("自分の駒を選択してください。")
        self.select_piece(piece)

    def _handle_select_target(self, row: int, col: int):
        selected = self.selected_piece

        if (row, col) == selected.position:
            self.deselect()
            return

        move = _find_action(self.valid_moves, row, col)
        attack = _find_action(self.valid_attacks, row, col)
        special = _find_action(self.valid_special_actions, row, col)

        if move:
            self._execute_move(selected, move)
        elif attack:
            self._initiate_attack(selected, self.board.get_piece(row, col))
        elif special:
            self._execute_special_action(selected, special)
        else:
            clicked = self.board.get_piece(row, col)
            if clicked is not None and clicked.owner == self.current_player:
                self.select_piece(clicked)
            else:
                self.deselect()

    def _handle_select_staging(self, row: int, col: int):
        if (row, col) in self.staging_options:
            self._execute_attack((row, col))
        else:
            self.deselect()

    def _handle_select_resting(self, row: int, col: int):
        # 攻撃の途中なので選択解除はしない
        if (row, col) in self.resting_options:
            self._complete_resting((row, col))
        else:
            self.status = "休息マスを選択してください。"

    # ------------------------------------------------------------------
    # 選択
    # ------------------------------------------------------------------

    def select_piece(self, piece: Piece):
        """
        駒を選択し、このターンに使える行動候補を計算する
        通常の駒: 通常の行動枠が残っていれば移動・攻撃
        生・死: 特殊の行動枠で移動、通常の行動枠で回復・即死
        """
        if piece.owner != self.current_player:
            raise IllegalAction("相手の駒は選択できません。")

        actions = Rules.get_possible_actions(self.board, piece)
        standard_available = not self.turn.standard_move_made
        special_available = not self.turn.special_move_made

        if piece.is_standard:
            moves = actions.moves if standard_available else []
            attacks = actions.attacks if standard_available else []
            specials: List[Action] = []
        else:
            moves = actions.moves if special_available else []
            attacks = []
            specials = actions.special_actions if standard_available else []

        if not (moves or attacks or specials):
            raise IllegalAction("この駒はこのターンに行動できません。")

        self._reset_selection()
        self.selected_piece = piece
        self.phase = Phase.SELECT_TARGET
        self.valid_moves = moves
        self.valid_attacks = attacks
        self.valid_special_actions = specials
        self.status = f"{piece.name}の移動先・攻撃対象を選択してください。"
        logger.debug("Selected %r: %d moves, %d attacks, %d specials",
                     piece, len(moves), len(attacks), len(specials))

    def _reset_selection(self):
        self.phase = Phase.SELECT_PIECE
        self.selected_piece: Optional[Piece] = None
        self.valid_moves: List[Action] = []
        self.valid_attacks: List[Action] = []
        self.valid_special_actions: List[Action] = []
        self.staging_options: List[Tuple[int, int]] = []
        self.resting_options: List[Tuple[int, int]] = []
        self.attack_info: Optional[AttackInfo] = None

    def deselect(self):
        """選択を解除して駒の選択フェーズに戻る"""
        self._reset_selection()
        self.status = STATUS_SELECT_PIECE

    # ------------------------------------------------------------------
    # 行動の実行
    # ------------------------------------------------------------------

    def _execute_move(self, piece: Piece, action: Action):
        """移動を実行する（通り抜け効果で破壊された場合は移動しない）"""
        from_pos = piece.position

        if action.is_special_jump:
            destroyed = Effects.apply_pass_through(self.board, piece, action.jumped_piece)
        elif piece.piece_type == PieceType.KNIGHT:
            # ナイトは跳ぶので通り抜け効果を受けない
            destroyed = False
        else:
            destroyed = Effects.check_path(self.board, piece, from_pos, action.to_pos)

        if destroyed:
            message = f"{piece.name}は死の駒に触れて破壊されました。"
        else:
            self.board.move_piece(piece, *action.to_pos)
            piece.has_moved = True
            message = None

        logger.debug("%r moved %s -> %s (destroyed=%s)",
                     piece, format_position(*from_pos), format_position(*action.to_pos), destroyed)

        slot = ActionSlot.STANDARD if piece.is_standard else ActionSlot.SPECIAL
        self._complete_action(slot, message)

    def _initiate_attack(self, attacker: Piece, target: Piece):
        staging = Rules.get_staging_squares(self.board, attacker, target)
        if not staging:
            raise NoStagingAvailable()

        self.attack_info = AttackInfo(attacker, target)

        if len(staging) == 1 and self.settings.auto_single_staging:
            self._execute_attack(staging[0])
            return

        self.phase = Phase.SELECT_STAGING
        self.valid_moves = []
        self.valid_attacks = []
        self.valid_special_actions = []
        self.staging_options = staging
        self.status = "攻撃の待機マスを選択してください。"

    def _execute_attack(self, staging: Tuple[int, int]):
        """
        待機マスへ移動して攻撃する
        目標に盾があれば盾を壊して終了、なければ目標を取り除いて休息マスの選択へ
        """
        attacker = self.attack_info.attacker
        target = self.attack_info.target
        from_pos = attacker.position

        destroyed = False
        if attacker.piece_type != PieceType.KNIGHT:
            destroyed = Effects.check_path(self.board, attacker, from_pos, staging)
        if destroyed:
            self._complete_action(ActionSlot.STANDARD, f"{attacker.name}は待機マスへ向かう途中で破壊されました。")
            return

        self.board.move_piece(attacker, *staging)
        attacker.has_moved = True

        if target.has_shield:
            target.has_shield = False
            logger.debug("%r broke the shield of %r", attacker, target)
            self._complete_action(ActionSlot.STANDARD, f"{target.name}の盾を破壊しました。")
            return

        target_pos = target.position
        self.board.remove_piece(target)
        logger.debug("%r captured %r", attacker, target)

        self.phase = Phase.SELECT_RESTING
        self.staging_options = []
        self.resting_options = [staging, target_pos]
        self.attack_info = AttackInfo(attacker, staging=staging)
        self.status = "休息マスを選択してください。"

    def _complete_resting(self, square: Tuple[int, int]):
        attacker = self.attack_info.attacker
        if square != attacker.position:
            destroyed = Effects.check_path(self.board, attacker, attacker.position, square)
            if not destroyed:
                self.board.move_piece(attacker, *square)
        self._complete_action(ActionSlot.STANDARD)

    def _execute_special_action(self, piece: Piece, action: Action):
        """回復・即死を実行する（通常の行動枠を使う）"""
        target = self.board.get_piece(*action.to_pos)

        if action.action_type == ActionType.HEAL:
            target.has_shield = True
            target.is_immune = True
            target.is_intimidated = False
            message = f"{target.name}を回復しました。"
        else:
            self.board.remove_piece(target)
            message = f"{target.name}を即死させました。"

        logger.debug("%r %s %r", piece, action.action_type.name, target)
        self._complete_action(ActionSlot.STANDARD, message)

    def _complete_action(self, slot: ActionSlot, message: Optional[str] = None):
        """行動枠を消費し、効果を解決してターン終了を判定する"""
        self.turn.use(slot)
        Effects.check_for_annihilation(self.board)
        Effects.check_for_check(self.board)
        self.deselect()
        if message:
            self.status = message
        self._check_and_end_turn()

    # ------------------------------------------------------------------
    # ターン
    # ------------------------------------------------------------------

    def can_make_action(self, slot: ActionSlot) -> bool:
        """現在のプレイヤーが指定の行動枠をまだ使えるか（行動候補があるか）"""
        if self.turn.is_used(slot):
            return False
        return Rules.player_has_actions(self.board, self.current_player, slot)

    def _has_remaining_action(self) -> bool:
        return self.can_make_action(ActionSlot.STANDARD) or self.can_make_action(ActionSlot.SPECIAL)

    def _check_and_end_turn(self):
        if self._has_remaining_action():
            return

        delay = self.settings.turn_switch_delay
        if delay > 0 and self.scheduler is not None:
            self.pending_turn_switch = True
            self.status = f"{PLAYER_NAMES[self.current_player]}のターンを終了します..."
            self.scheduler(delay, self.finish_turn_switch)
        else:
            self._switch_turn()

    def finish_turn_switch(self):
        """保留中のターン交代を実行する（保留がなければ何もしない）"""
        if not self.pending_turn_switch:
            return
        self.pending_turn_switch = False
        self._switch_turn()
        self._notify()

    def end_turn(self) -> bool:
        """
        手動でターンを終了する
        行動枠を1つ以上使っていて、攻撃の途中でない場合のみ
        返り値: 終了できたらTrue
        """
        if self.pending_turn_switch:
            return False
        if self.phase in (Phase.SELECT_STAGING, Phase.SELECT_RESTING):
            return False
        if not (self.turn.standard_move_made or self.turn.special_move_made):
            return False

        self._switch_turn()
        self._notify()
        return True

    def _begin_turn(self):
        """手番を交代し、新しい手番のプレイヤーの駒の免疫を解除する"""
        self.turn.switch()
        for piece in self.board.get_pieces(self.current_player):
            piece.is_immune = False
        self.deselect()
        logger.info("Turn passed to %s", self.current_player.name)

    def _switch_turn(self):
        # 行動できないプレイヤーは自動的にパスする（双方とも行動できなければ止まる）
        for _ in range(2):
            self._begin_turn()
            if self._has_remaining_action():
                self.status = f"{PLAYER_NAMES[self.current_player]}の番です。{STATUS_SELECT_PIECE}"
                return
            logger.info("%s has no available action", self.current_player.name)
        self.status = "どちらのプレイヤーも行動できません。"

    # ------------------------------------------------------------------
    # 状態の出力
    # ------------------------------------------------------------------

    def _special_move_status(self) -> str:
        if self.turn.special_move_made:
            return "USED"
        if Rules.player_has_actions(self.board, self.current_player, ActionSlot.SPECIAL):
            return "AVAILABLE"
        return "UNAVAILABLE"

    def snapshot(self) -> dict:
        """描画用の読み取り専用スナップショット（JSONに変換可能）"""
        return {
            "board": self.board.to_dict(),
            "current_player": self.current_player.name,
            "phase": self.phase.value,
            "selected": list(self.selected_piece.position) if self.selected_piece else None,
            "valid_moves": [action.to_dict() for action in self.valid_moves],
            "valid_attacks": [action.to_dict() for action in self.valid_attacks],
            "valid_special_actions": [action.to_dict() for action in self.valid_special_actions],
            "staging_options": [list(square) for square in self.staging_options],
            "resting_options": [list(square) for square in self.resting_options],
            "turn": self.turn.to_dict(),
            "special_move_available": self._special_move_status(),
            "pending_turn_switch": self.pending_turn_switch,
            "status": self.status,
        }

    def _notify(self):
        if self.renderer is not None:
            self.renderer(self.snapshot())
