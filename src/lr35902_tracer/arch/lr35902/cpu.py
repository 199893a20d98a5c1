# lr35902_tracer/arch/lr35902/cpu.py
"""
LR35902 CPUエミュレーションの中心モジュール。

このモジュールはLR35902 CPUの具体的な実装を提供し、
AbstractCpuインターフェースを実装します。
"""
from typing import Dict, List, Optional, Tuple

from lr35902_tracer.core.cpu import AbstractCpu
from lr35902_tracer.arch.lr35902.state import Lr35902CpuState
from lr35902_tracer.arch.lr35902.instructions import (
    ArithmeticTarget, Instruction, decode_opcode, execute_instruction
)
from lr35902_tracer.arch.lr35902 import disassembler
from lr35902_tracer.common.types import RegisterLayoutInfo, RegisterInfo

# @intent:responsibility LR35902 CPUの具体的なエミュレーションロジックを提供します。
class Lr35902Cpu(AbstractCpu):
    """
    LR35902 CPUをエミュレートするクラス。
    """

    def _create_initial_state(self) -> Lr35902CpuState:
        return Lr35902CpuState()

    # @intent:rationale デコードは純粋な表引きです。オペランドの値は実行時に取得します。
    def _decode(self, opcode: int) -> Optional[Instruction]:
        return decode_opcode(opcode)

    def _execute(self, instruction: Instruction) -> int:
        return execute_instruction(instruction, self._state, self._bus)

    def _cycles_of(self, instruction: Instruction) -> int:
        return instruction.cycle_count

    def _describe(self, address: int, instruction: Instruction) -> str:
        if instruction.target is ArithmeticTarget.D8:
            return instruction.render(self._bus.peek((address + 1) & 0xFFFF))
        return instruction.mnemonic

    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        return {
            "A": s.a, "F": s.f, "B": s.b, "C": s.c, "D": s.d, "E": s.e, "H": s.h, "L": s.l,
            "AF": s.af, "BC": s.bc, "DE": s.de, "HL": s.hl,
            "SP": s.sp, "PC": s.pc,
        }

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("Register Pairs", [
                RegisterInfo("AF", 16), RegisterInfo("BC", 16), RegisterInfo("DE", 16), RegisterInfo("HL", 16)
            ]),
            RegisterLayoutInfo("Control", [
                RegisterInfo("SP", 16), RegisterInfo("PC", 16)
            ]),
        ]

    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {
            "Z": s.flag_z,
            "N": s.flag_n,
            "H": s.flag_h,
            "C": s.flag_c,
        }

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
