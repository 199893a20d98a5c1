"""
LR35902命令セット実装パッケージ。
"""
from typing import Mapping, Optional

from lr35902_tracer.transport.bus import Bus
from lr35902_tracer.core.errors import UnimplementedInstructionError
from lr35902_tracer.arch.lr35902.state import Lr35902CpuState
from lr35902_tracer.arch.lr35902.alu import AluFunction
from .base import ArithmeticOperation, ArithmeticTarget, Instruction
from .alu import execute_alu
from .maps import DECODE_MAP, ALU_OPERATIONS

# @intent:responsibility 与えられたオペコードをLR35902の命令としてデコードします。
# @intent:post-condition 表にないオペコードにはNoneを返します。バスにはアクセスしません。
def decode_opcode(opcode: int) -> Optional[Instruction]:
    decoder = DECODE_MAP.get(opcode)
    if decoder:
        return decoder(opcode)
    return None

# @intent:responsibility デコードされた命令を実行し、次のPCを返します。
# @intent:post-condition 実行ロジックがない演算の場合、状態を変更せずにUnimplementedInstructionErrorを送出します。
def execute_instruction(instruction: Instruction, state: Lr35902CpuState, bus: Bus,
                        operations: Mapping[ArithmeticOperation, AluFunction] = ALU_OPERATIONS) -> int:
    alu = operations.get(instruction.operation)
    if alu is None:
        raise UnimplementedInstructionError(instruction)
    return execute_alu(instruction, state, bus, alu)

__all__ = [
    "ArithmeticOperation", "ArithmeticTarget", "Instruction",
    "decode_opcode", "execute_instruction", "DECODE_MAP", "ALU_OPERATIONS",
]
