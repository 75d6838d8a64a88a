"""
駒の行動（移動・攻撃・特殊行動）を表現するモジュール
"""

from enum import Enum, auto
from typing import Iterator, List, Optional, Tuple

from .piece import Piece
from .initial_setup import format_position


class ActionType(Enum):
    """行動の種類"""
    MOVE = auto()    # 空きマスへの移動
    ATTACK = auto()  # 敵の駒への攻撃
    HEAL = auto()    # 生の回復
    KILL = auto()    # 死の即死攻撃


class ActionSlot(Enum):
    """1ターンに使える行動枠"""
    STANDARD = auto()  # 通常の駒の行動、または生・死の特殊行動
    SPECIAL = auto()   # 生・死の斜め移動


class Action:
    """駒が取れる行動の候補を表すクラス"""

    def __init__(
        self,
        action_type: ActionType,
        from_pos: Tuple[int, int],
        to_pos: Tuple[int, int],
        is_special_jump: bool = False,
        jumped_piece: Optional[Piece] = None,
        is_ramp_jump: bool = False
    ):
        self.action_type = action_type
        self.from_pos = from_pos
        self.to_pos = to_pos
        self.is_special_jump = is_special_jump  # ポーンの生・死飛び越え
        self.jumped_piece = jumped_piece        # 飛び越えられる生・死の駒
        self.is_ramp_jump = is_ramp_jump        # ナイトの踏み台ジャンプ

    @property
    def is_special_action(self) -> bool:
        return self.action_type in (ActionType.HEAL, ActionType.KILL)

    def __str__(self):
        return (
            f"{self.action_type.name} "
            f"{format_position(*self.from_pos)} -> {format_position(*self.to_pos)}"
        )

    def __repr__(self):
        return (
            f"Action(type={self.action_type.name}, "
            f"from={self.from_pos}, to={self.to_pos}, "
            f"special_jump={self.is_special_jump}, ramp_jump={self.is_ramp_jump})"
        )

    def to_dict(self) -> dict:
        """行動を辞書形式に変換（API用）"""
        return {
            "type": self.action_type.name,
            "from": list(self.from_pos),
            "to": list(self.to_pos),
            "is_special_jump": self.is_special_jump,
            "is_ramp_jump": self.is_ramp_jump,
        }

    @staticmethod
    def create_move(from_pos: Tuple[int, int], to_pos: Tuple[int, int]) -> 'Action':
        """通常の移動を作成"""
        return Action(ActionType.MOVE, from_pos, to_pos)

    @staticmethod
    def create_special_jump(
        from_pos: Tuple[int, int],
        to_pos: Tuple[int, int],
        jumped_piece: Piece
    ) -> 'Action':
        """ポーンが生・死を飛び越える移動を作成"""
        return Action(
            ActionType.MOVE, from_pos, to_pos,
            is_special_jump=True,
            jumped_piece=jumped_piece
        )

    @staticmethod
    def create_ramp_jump(from_pos: Tuple[int, int], to_pos: Tuple[int, int]) -> 'Action':
        """ナイトの踏み台ジャンプを作成"""
        return Action(ActionType.MOVE, from_pos, to_pos, is_ramp_jump=True)

    @staticmethod
    def create_attack(from_pos: Tuple[int, int], to_pos: Tuple[int, int]) -> 'Action':
        """攻撃を作成"""
        return Action(ActionType.ATTACK, from_pos, to_pos)

    @staticmethod
    def create_heal(from_pos: Tuple[int, int], to_pos: Tuple[int, int]) -> 'Action':
        """回復を作成"""
        return Action(ActionType.HEAL, from_pos, to_pos)

    @staticmethod
    def create_kill(from_pos: Tuple[int, int], to_pos: Tuple[int, int]) -> 'Action':
        """即死攻撃を作成"""
        return Action(ActionType.KILL, from_pos, to_pos)


class PossibleActions:
    """駒1つ分の行動候補（移動・攻撃・特殊行動）"""

    def __init__(
        self,
        moves: Optional[List[Action]] = None,
        attacks: Optional[List[Action]] = None,
        special_actions: Optional[List[Action]] = None
    ):
        self.moves = moves or []
        self.attacks = attacks or []
        self.special_actions = special_actions or []

    def __iter__(self) -> Iterator[Action]:
        yield from self.moves
        yield from self.attacks
        yield from self.special_actions

    def is_empty(self) -> bool:
        return not (self.moves or self.attacks or self.special_actions)

    def move_targets(self) -> List[Tuple[int, int]]:
        return [action.to_pos for action in self.moves]

    def attack_targets(self) -> List[Tuple[int, int]]:
        return [action.to_pos for action in self.attacks]

    def to_dict(self) -> dict:
        return {
            "moves": [action.to_dict() for action in self.moves],
            "attacks": [action.to_dict() for action in self.attacks],
            "special_actions": [action.to_dict() for action in self.special_actions],
        }
