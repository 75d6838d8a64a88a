"""
ゲームエンジンの例外階層

通常のプレイでは致命的なエラーは存在しない。各フェーズの処理はこれらの例外を送出し、
Game.handle_click が捕捉して選択を解除し、ステータス文字列にメッセージを表示する。
"""

__all__ = [
    "EngineError",
    "InvalidCoordinate",
    "IllegalAction",
    "NoStagingAvailable",
]


class EngineError(Exception):
    """エンジンの例外の基底クラス"""
    code: str = "ENGINE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidCoordinate(EngineError):
    """盤外の座標が指定された"""
    code = "INVALID_COORDINATE"

    def __init__(self, row, col):
        super().__init__(f"盤外の座標です: ({row}, {col})")
        self.row = row
        self.col = col


class IllegalAction(EngineError):
    """現在のフェーズで受け付けられない操作"""
    code = "ILLEGAL_ACTION"


class NoStagingAvailable(EngineError):
    """攻撃の待機マスが存在しない"""
    code = "NO_STAGING_AVAILABLE"

    def __init__(self, message: str = "この攻撃に使える待機マスがありません。"):
        super().__init__(message)
