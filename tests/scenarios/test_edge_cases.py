"""
シナリオテスト: エッジケースと境界条件
生・死の効果が連鎖する状況や盤の端での動きを確認
"""

import pytest
from src.engine import Board, Player, PieceType, Piece, Rules, Effects, Phase


class TestEdgeCases:
    """エッジケースのテストクラス"""

    def test_corner_king_movement(self, empty_board, place):
        """盤の角でのキングの動きを確認"""
        king = place(empty_board, PieceType.KING, Player.BLACK, 0, 0)

        actions = Rules.get_possible_actions(empty_board, king)

        for row, col in actions.move_targets():
            assert 0 <= row < 10, f"盤外の行{row}への移動が含まれています"
            assert 0 <= col < 10, f"盤外の列{col}への移動が含まれています"
        assert len(actions.moves) == 3, f"角からの移動が3方向ではありません: {len(actions.moves)}"

    def test_pawn_on_last_row_has_no_moves(self, empty_board, place):
        pawn = place(empty_board, PieceType.PAWN, Player.BLACK, 9, 4)

        assert Rules.get_possible_actions(empty_board, pawn).is_empty()

    def test_knight_ramp_at_edge(self, empty_board, place):
        """盤外への踏み台ジャンプは含まれないことを確認"""
        knight = place(empty_board, PieceType.KNIGHT, Player.WHITE, 0, 1)
        place(empty_board, PieceType.PAWN, Player.WHITE, 0, 0)

        actions = Rules.get_possible_actions(empty_board, knight)

        assert not any(action.is_ramp_jump for action in actions.moves)

    def test_life_crossing_center_changes_owner(self, empty_board, place, make_game):
        """生が盤の中央を越えると所有者が変わることを確認"""
        life = place(empty_board, PieceType.LIFE, Player.WHITE, 5, 2)
        place(empty_board, PieceType.KING, Player.WHITE, 9, 9)
        place(empty_board, PieceType.KING, Player.BLACK, 0, 0)
        game = make_game(empty_board)

        game.handle_click(5, 2)
        game.handle_click(4, 1)

        assert life.owner == Player.BLACK
        state = game.handle_click(4, 1)
        assert state["status"] == "自分の駒を選択してください。", "相手の陣地の生は選択できないべき"

    def test_life_moving_next_to_death_annihilates(self, empty_board, place, make_game):
        life = place(empty_board, PieceType.LIFE, Player.WHITE, 7, 2)
        death = place(empty_board, PieceType.DEATH, Player.WHITE, 6, 0)
        place(empty_board, PieceType.KING, Player.WHITE, 9, 9)
        game = make_game(empty_board)

        game.handle_click(7, 2)
        game.handle_click(6, 1)

        assert life not in game.board.get_pieces()
        assert death not in game.board.get_pieces()

    def test_heal_clears_intimidation(self, empty_board, place, make_game):
        """威嚇中の駒を回復すると、免疫で盾を保つことを確認"""
        rook = place(empty_board, PieceType.ROOK, Player.WHITE, 6, 3)
        place(empty_board, PieceType.LIFE, Player.WHITE, 7, 2)
        place(empty_board, PieceType.KING, Player.BLACK, 0, 3)
        place(empty_board, PieceType.KING, Player.WHITE, 9, 9)
        Effects.check_for_check(empty_board)
        assert rook.is_intimidated
        game = make_game(empty_board)

        game.handle_click(7, 2)
        game.handle_click(6, 3)

        assert rook.has_shield
        assert rook.is_immune
        assert not rook.is_intimidated, "回復した駒の威嚇状態が残っています"

    def test_immune_piece_cannot_be_killed(self, empty_board, place, make_game):
        place(empty_board, PieceType.DEATH, Player.BLACK, 2, 2)
        place(empty_board, PieceType.ROOK, Player.WHITE, 3, 3, is_immune=True)
        game = make_game(empty_board, current_player=Player.BLACK)

        state = game.handle_click(2, 2)

        assert [3, 3] not in [a["to"] for a in state["valid_special_actions"]]

    def test_adjacent_attack_rests_on_target(self, empty_board, place, make_game):
        """隣接した攻撃の後、目標のマスで休息できることを確認"""
        king = place(empty_board, PieceType.KING, Player.WHITE, 5, 5)
        place(empty_board, PieceType.PAWN, Player.BLACK, 4, 4, has_shield=False)
        place(empty_board, PieceType.KING, Player.BLACK, 0, 9)
        game = make_game(empty_board)

        game.handle_click(5, 5)
        state = game.handle_click(4, 4)
        assert state["phase"] == "SELECT_STAGING"
        assert sorted(state["staging_options"]) == [[4, 5], [5, 4]], "キングはその場で待機できないはず"

        state = game.handle_click(4, 5)
        assert state["phase"] == "SELECT_RESTING"
        assert state["resting_options"] == [[4, 5], [4, 4]]
        assert game.board.get_piece(4, 4) is None

        game.handle_click(4, 4)
        assert king.position == (4, 4)

    def test_staging_square_occupied_by_death(self, empty_board, place, make_game):
        """目標の直前に死の駒があると攻撃できないことを確認"""
        rook = place(empty_board, PieceType.ROOK, Player.WHITE, 4, 0, has_shield=False)
        place(empty_board, PieceType.DEATH, Player.WHITE, 4, 2)
        place(empty_board, PieceType.PAWN, Player.BLACK, 4, 3, has_shield=False)
        place(empty_board, PieceType.KING, Player.BLACK, 0, 9)
        game = make_game(empty_board)

        game.handle_click(4, 0)
        state = game.handle_click(4, 3)
        assert state["phase"] == "SELECT_PIECE", "待機マスが死の駒で塞がれています"
        assert state["status"] == "この攻撃に使える待機マスがありません。"
        assert rook.position == (4, 0)

    def test_snapshot_is_json_serializable(self, make_game):
        import json

        game = make_game()
        game.handle_click(8, 3)

        json.dumps(game.snapshot())

    def test_board_copy_preserves_flags(self, empty_board, place):
        place(empty_board, PieceType.ROOK, Player.WHITE, 3, 3, has_shield=False, is_immune=True,
              is_intimidated=True, has_moved=True)

        copied = empty_board.copy().get_piece(3, 3)

        assert (copied.has_shield, copied.is_immune, copied.is_intimidated, copied.has_moved) == \
            (False, True, True, True)
