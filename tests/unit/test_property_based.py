"""
プロパティベーステスト（Hypothesis）
任意のクリック列に対して状態機械の不変条件を検証する

戦略:
1. 盤外の座標は常に無効と判定されるべき
2. 駒の (row, col) と盤面上の位置は常に一致するべき
3. 行動候補の計算は盤面を変更しないべき
4. 生と死が隣接したまま行動が終わることはない
5. 盾が剥奪されている駒は必ず盾を持たない
"""

import pytest
from hypothesis import given, settings, strategies as st
from hypothesis.stateful import RuleBasedStateMachine, rule, invariant

from src.config import Settings
from src.engine import Board, Game, Phase, Rules, BOARD_SIZE
from src.engine.initial_setup import load_initial_board


# =============================================================================
# カスタム戦略の定義
# =============================================================================

coordinate = st.integers(min_value=-2, max_value=BOARD_SIZE + 1)
on_board = st.integers(min_value=0, max_value=BOARD_SIZE - 1)


def make_test_game() -> Game:
    return Game(settings=Settings(turn_switch_delay=0.0, auto_single_staging=False))


def assert_positions_consistent(board: Board):
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            piece = board.get_piece(row, col)
            if piece is not None:
                assert piece.position == (row, col), f"{piece!r}の位置が盤面と一致しません"


# =============================================================================
# 不変条件テスト
# =============================================================================

class TestPropertyBasedBoard:
    """プロパティベーステスト: 盤面"""

    @given(st.integers(), st.integers())
    @settings(max_examples=100)
    def test_position_validity(self, row: int, col: int):
        """位置の有効性チェックが正しく機能するか"""
        board = Board()
        assert board.is_valid_position(row, col) == (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE)

    @given(st.integers(), st.integers())
    @settings(max_examples=100)
    def test_get_piece_never_raises(self, row: int, col: int):
        board = load_initial_board()
        piece = board.get_piece(row, col)
        if not board.is_valid_position(row, col):
            assert piece is None

    def test_rules_are_pure(self):
        """不変条件: 行動候補の計算は盤面を変更しない"""
        board = load_initial_board()
        before = board.to_dict()

        for piece in board.get_pieces():
            Rules.get_possible_actions(board, piece)

        assert board.to_dict() == before


class TestRandomClicks:
    """ランダムなクリック列によるバグ検出"""

    @settings(max_examples=30, deadline=None)
    @given(st.lists(st.tuples(coordinate, coordinate), max_size=60))
    def test_random_clicks_keep_board_consistent(self, clicks):
        """任意のクリック列でもクラッシュせず、盤面が一貫しているか"""
        game = make_test_game()

        for row, col in clicks:
            state = game.handle_click(row, col)
            assert state["phase"] in {phase.value for phase in Phase}
            assert_positions_consistent(game.board)

    @settings(max_examples=20, deadline=None)
    @given(st.data())
    def test_following_valid_targets(self, data):
        """選択可能なマスだけをたどっても不変条件が崩れないか"""
        game = make_test_game()

        for _ in range(40):
            state = game.snapshot()
            choices = [tuple(square) for square in state["staging_options"] + state["resting_options"]]
            for key in ("valid_moves", "valid_attacks", "valid_special_actions"):
                choices.extend(tuple(action["to"]) for action in state[key])
            if not choices:
                choices = [piece.position for piece in game.board.get_pieces(game.current_player)]
            if not choices:
                break
            row, col = data.draw(st.sampled_from(choices))
            game.handle_click(row, col)

            assert_positions_consistent(game.board)
            for piece in game.board.iter_pieces():
                if piece.is_intimidated:
                    assert not piece.has_shield


class ClickStateMachine(RuleBasedStateMachine):
    """クリックを入力とする状態機械のモデル検査"""

    def __init__(self):
        super().__init__()
        self.game = make_test_game()

    @rule(row=on_board, col=on_board)
    def click(self, row, col):
        self.game.handle_click(row, col)

    @rule()
    def end_turn(self):
        if self.game.end_turn():
            assert self.game.phase == Phase.SELECT_PIECE
            assert not self.game.turn.standard_move_made

    @invariant()
    def positions_match_board(self):
        assert_positions_consistent(self.game.board)

    @invariant()
    def no_adjacent_life_and_death_between_actions(self):
        if self.game.phase != Phase.SELECT_PIECE:
            return
        pieces = [p for p in self.game.board.iter_pieces() if p.is_life_or_death]
        for first in pieces:
            for second in pieces:
                if first.piece_type == second.piece_type:
                    continue
                distance = max(abs(first.row - second.row), abs(first.col - second.col))
                assert distance > 1, "隣接した生と死が残っています"

    @invariant()
    def selection_matches_phase(self):
        if self.game.phase == Phase.SELECT_PIECE:
            assert self.game.selected_piece is None
        elif self.game.phase == Phase.SELECT_TARGET:
            assert self.game.selected_piece is not None


ClickStateMachine.TestCase.settings = settings(max_examples=20, stateful_step_count=30, deadline=None)
TestClickStateMachine = ClickStateMachine.TestCase
