"""
LR35902命令セット実装のための共通の型とヘルパー関数。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from lr35902_tracer.arch.lr35902.state import Lr35902CpuState
from lr35902_tracer.transport.bus import Bus


# @intent:data_structure 算術論理演算命令の種類を表します。値はニーモニックです。
class ArithmeticOperation(Enum):
    ADD = "ADD"
    ADC = "ADC"
    SUB = "SUB"
    SBC = "SBC"
    AND = "AND"
    XOR = "XOR"
    OR = "OR"
    CP = "CP"


# @intent:data_structure 右オペランドの取得元（アドレッシングモード）を表します。
class ArithmeticTarget(Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    H = "H"
    L = "L"
    HL = "(HL)"  # HLが指すメモリ上のバイト
    D8 = "d8"    # オペコード直後の即値バイト


# オペコード下位3ビットとオペランドの対応
TARGET_CODES = {
    0b000: ArithmeticTarget.B, 0b001: ArithmeticTarget.C,
    0b010: ArithmeticTarget.D, 0b011: ArithmeticTarget.E,
    0b100: ArithmeticTarget.H, 0b101: ArithmeticTarget.L,
    0b110: ArithmeticTarget.HL, 0b111: ArithmeticTarget.A,
}

# オペコードのビット5-3と演算の対応
OPERATION_CODES = {
    0b000: ArithmeticOperation.ADD, 0b001: ArithmeticOperation.ADC,
    0b010: ArithmeticOperation.SUB, 0b011: ArithmeticOperation.SBC,
    0b100: ArithmeticOperation.AND, 0b101: ArithmeticOperation.XOR,
    0b110: ArithmeticOperation.OR, 0b111: ArithmeticOperation.CP,
}

# "A," を付けて表記する演算
_ACCUMULATOR_FORM = {ArithmeticOperation.ADD, ArithmeticOperation.ADC, ArithmeticOperation.SBC}


# @intent:responsibility デコード済みの1命令を表します。1命令サイクルの間だけ存在する値です。
@dataclass(frozen=True)
class Instruction:
    """
    演算の種類と右オペランドの取得元の組。
    命令長とサイクル数はオペランドの取得元から決まります。
    """
    operation: ArithmeticOperation
    target: ArithmeticTarget

    @property
    def length(self) -> int:
        return 2 if self.target is ArithmeticTarget.D8 else 1

    @property
    def cycle_count(self) -> int:
        return 8 if self.target in (ArithmeticTarget.HL, ArithmeticTarget.D8) else 4

    @property
    def mnemonic(self) -> str:
        return self.render()

    # @intent:responsibility アセンブリ表記を生成します。即値が与えられた場合はd8を置き換えます。
    def render(self, immediate: Optional[int] = None) -> str:
        operand = self.target.value
        if self.target is ArithmeticTarget.D8 and immediate is not None:
            operand = f"${immediate:02X}"
        if self.operation in _ACCUMULATOR_FORM:
            return f"{self.operation.value} A,{operand}"
        return f"{self.operation.value} {operand}"

    def __str__(self) -> str:
        return self.mnemonic


# @intent:utility_function オペコード下位3ビットに対応するオペランドを返します。
def get_target(code: int) -> ArithmeticTarget:
    return TARGET_CODES[code & 0b111]


# @intent:utility_function オペコードのビット5-3に対応する演算を返します。
def get_operation(opcode: int) -> ArithmeticOperation:
    return OPERATION_CODES[(opcode >> 3) & 0b111]


# @intent:utility_function アドレッシングモードに従ってオペランドの値を取得します。
# @intent:pre-condition state.pcは実行中の命令のオペコードを指している必要があります。
def fetch_operand(target: ArithmeticTarget, state: Lr35902CpuState, bus: Bus) -> int:
    if target is ArithmeticTarget.HL:
        return bus.read_byte(state.hl)
    if target is ArithmeticTarget.D8:
        return bus.read_byte((state.pc + 1) & 0xFFFF)
    return getattr(state, target.name.lower())
