"""
ライフ＆デス・チェスの描画側アダプタ（FastAPI）
"""
