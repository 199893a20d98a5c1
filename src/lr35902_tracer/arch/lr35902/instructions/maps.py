"""
LR35902 命令マッピング定義。
オペコードとデコード関数、演算種別とALU関数の対応表を構築します。
"""
from lr35902_tracer.arch.lr35902.alu import add8, adc8, sub8, sbc8, and8, xor8, or8, cp8
from .alu import decode_alu_r, decode_alu_d8
from .base import ArithmeticOperation

# 表にないオペコード（ロード、ジャンプ、0xCBプレフィックス等）はデコードされません。
DECODE_MAP = {
    **{op: decode_alu_r for op in range(0x80, 0xC0)},         # ADD/ADC/SUB/SBC/AND/XOR/OR/CP r
    **{op: decode_alu_d8 for op in range(0xC6, 0x100, 0x08)}, # ADD/ADC/SUB/SBC/AND/XOR/OR/CP d8
}

ALU_OPERATIONS = {
    ArithmeticOperation.ADD: add8,
    ArithmeticOperation.ADC: adc8,
    ArithmeticOperation.SUB: sub8,
    ArithmeticOperation.SBC: sbc8,
    ArithmeticOperation.AND: and8,
    ArithmeticOperation.XOR: xor8,
    ArithmeticOperation.OR: or8,
    ArithmeticOperation.CP: cp8,
}
