"""
LR35902 ALU (算術論理演算ユニット)。

各演算は (アキュムレータ, オペランド, 入力キャリー) から (結果, フラグ) を計算する純粋関数です。
レジスタファイルへの反映は実行エンジンが行います。オーバーフローは例外ではなく
Carry/Half Carryフラグとして表現されます。
"""
from typing import Callable, NamedTuple, Tuple


# @intent:data_structure 演算後の4つのフラグ（Z, N, H, C）を表します。
class Flags(NamedTuple):
    zero: bool
    subtraction: bool
    half_carry: bool
    carry: bool


AluResult = Tuple[int, Flags]
AluFunction = Callable[[int, int, bool], AluResult]


# @intent:utility_function 8ビットのラップアラウンド加算を行い、(結果, オーバーフロー有無) を返します。
def overflowing_add8(x: int, y: int) -> Tuple[int, bool]:
    total = x + y
    return total & 0xFF, total > 0xFF


# @intent:utility_function 8ビットのラップアラウンド減算を行い、(結果, アンダーフロー有無) を返します。
def overflowing_sub8(x: int, y: int) -> Tuple[int, bool]:
    return (x - y) & 0xFF, x < y


# @intent:responsibility ADD命令: 入力キャリーは無視します。
def add8(accumulator: int, value: int, carry_in: bool = False) -> AluResult:
    """ADD A,x の結果とフラグを計算します。"""
    result, overflow = overflowing_add8(accumulator, value)
    # Half Carry: ビット3からビット4への桁上がり
    half_carry = (accumulator & 0xF) + (value & 0xF) > 0xF
    return result, Flags(zero=result == 0, subtraction=False, half_carry=half_carry, carry=overflow)


# @intent:responsibility ADC命令: 入力キャリーをオペランドに先に畳み込み、その中間値をアキュムレータに加算します。
# @intent:rationale Half Carryは畳み込み後の中間値に対して判定します。
#                   (a & 0xF) + (value & 0xF) + carry とは等価ではないため、式を組み替えてはいけません。
def adc8(accumulator: int, value: int, carry_in: bool = False) -> AluResult:
    """ADC A,x の結果とフラグを計算します。"""
    intermediate, first_overflow = overflowing_add8(value, 1 if carry_in else 0)
    result, second_overflow = overflowing_add8(accumulator, intermediate)
    half_carry = (accumulator & 0xF) + (intermediate & 0xF) > 0xF
    return result, Flags(
        zero=result == 0,
        subtraction=False,
        half_carry=half_carry,
        carry=first_overflow or second_overflow,
    )


# @intent:responsibility SUB命令: ADDと対称な借り（ボロー）判定を行います。
def sub8(accumulator: int, value: int, carry_in: bool = False) -> AluResult:
    """SUB x の結果とフラグを計算します。"""
    result, underflow = overflowing_sub8(accumulator, value)
    # Half Carry: ビット4からの借り
    half_carry = (accumulator & 0xF) < (value & 0xF)
    return result, Flags(zero=result == 0, subtraction=True, half_carry=half_carry, carry=underflow)


# @intent:responsibility SBC命令: ADCと同じ順序で、入力キャリーをオペランドに畳み込んでから減算します。
def sbc8(accumulator: int, value: int, carry_in: bool = False) -> AluResult:
    """SBC A,x の結果とフラグを計算します。"""
    intermediate, first_overflow = overflowing_add8(value, 1 if carry_in else 0)
    result, second_underflow = overflowing_sub8(accumulator, intermediate)
    half_carry = (accumulator & 0xF) < (intermediate & 0xF)
    return result, Flags(
        zero=result == 0,
        subtraction=True,
        half_carry=half_carry,
        carry=first_overflow or second_underflow,
    )


def and8(accumulator: int, value: int, carry_in: bool = False) -> AluResult:
    """AND x: Hは常にセットされます。"""
    result = accumulator & value
    return result, Flags(zero=result == 0, subtraction=False, half_carry=True, carry=False)


def xor8(accumulator: int, value: int, carry_in: bool = False) -> AluResult:
    result = (accumulator ^ value) & 0xFF
    return result, Flags(zero=result == 0, subtraction=False, half_carry=False, carry=False)


def or8(accumulator: int, value: int, carry_in: bool = False) -> AluResult:
    result = (accumulator | value) & 0xFF
    return result, Flags(zero=result == 0, subtraction=False, half_carry=False, carry=False)


# @intent:responsibility CP命令: SUBと同じフラグを計算し、アキュムレータの値をそのまま返します。
def cp8(accumulator: int, value: int, carry_in: bool = False) -> AluResult:
    """CP x: 比較のみ。結果はアキュムレータに書き戻されません。"""
    _, flags = sub8(accumulator, value)
    return accumulator, flags
