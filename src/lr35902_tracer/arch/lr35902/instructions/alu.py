"""
LR35902 算術論理演算 (ALU) 命令のデコードと実行。
"""
from lr35902_tracer.arch.lr35902.state import Lr35902CpuState
from lr35902_tracer.arch.lr35902.alu import AluFunction
from lr35902_tracer.transport.bus import Bus
from .base import (
    ArithmeticOperation, ArithmeticTarget, Instruction,
    get_operation, get_target, fetch_operand
)

# --- Decoding Functions ---

# @intent:responsibility 0x80-0xBF (演算 A,r / 演算 A,(HL)) をデコードします。
def decode_alu_r(opcode: int) -> Instruction:
    return Instruction(get_operation(opcode), get_target(opcode))

# @intent:responsibility 0xC6, 0xCE, ... 0xFE (演算 A,d8) をデコードします。
def decode_alu_d8(opcode: int) -> Instruction:
    return Instruction(get_operation(opcode), ArithmeticTarget.D8)

# --- Execution Functions ---

# @intent:responsibility オペランドを取得して演算を行い、結果とフラグをレジスタファイルに反映します。
# @intent:post-condition 次に実行すべきPCを返します。state.pc自体は変更しません。
def execute_alu(instruction: Instruction, state: Lr35902CpuState, bus: Bus, alu: AluFunction) -> int:
    value = fetch_operand(instruction.target, state, bus)
    result, flags = alu(state.a, value, state.flag_c)

    # アキュムレータが左オペランドかつ書き込み先。CPは比較のみ。
    if instruction.operation is not ArithmeticOperation.CP:
        state.a = result
    state.flag_z = flags.zero
    state.flag_n = flags.subtraction
    state.flag_h = flags.half_carry
    state.flag_c = flags.carry

    return (state.pc + instruction.length) & 0xFFFF
