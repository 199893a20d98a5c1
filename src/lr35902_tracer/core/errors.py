# lr35902_tracer/core/errors.py
"""
Core Layer (例外定義)

命令サイクル中に発生し得る失敗を型として区別します。
算術演算はオーバーフローをフラグとして表現するため、ここには含まれません。
"""
from typing import Any


# @intent:responsibility CPUコアが送出する全ての例外の基底クラスです。
class CpuError(Exception):
    pass


# @intent:responsibility オペコード表に存在しないバイトをフェッチしたことを表します。
# @intent:post-condition 送出時点でPCは進められていません。
class DecodeError(CpuError):
    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"Unknown opcode {opcode:#04x} at {address:#06x}")


# @intent:responsibility デコードはできたが実行ロジックが存在しない命令を表します。
# @intent:post-condition 送出時点でレジスタとPCは変更されていません。
class UnimplementedInstructionError(CpuError):
    def __init__(self, instruction: Any):
        self.instruction = instruction
        super().__init__(f"Instruction not implemented: {instruction}")
