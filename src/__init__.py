"""
ライフ＆デス・チェス
"""
