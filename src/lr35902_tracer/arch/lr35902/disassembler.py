"""
LR35902逆アセンブラモジュール。

メモリ上のバイナリデータを解析し、アセンブリ言語のニーモニック形式に変換します。
"""
from typing import List, Tuple
from lr35902_tracer.transport.bus import Bus
from lr35902_tracer.arch.lr35902.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲のバイナリデータを解析し、アドレスとニーモニックのリストを返します。
# @intent:rationale バスアクティビティログを汚さないよう、読み取りは全てpeekで行います。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    メモリ上のデータを読み取り、(アドレス, 16進ダンプ, ニーモニック) のタプルのリストを返します。
    表にないバイトは "DB $xx" として1バイトずつ出力します。
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr and current_addr <= 0xFFFF:
        try:
            opcode = bus.peek(current_addr)
            instruction = decode_opcode(opcode)

            if instruction is None:
                result.append((current_addr, f"{opcode:02X}", f"DB ${opcode:02X}"))
                current_addr += 1
                continue

            operand_bytes = [bus.peek((current_addr + i) & 0xFFFF) for i in range(1, instruction.length)]
            hex_dump = " ".join(f"{b:02X}" for b in [opcode] + operand_bytes)
            immediate = operand_bytes[0] if operand_bytes else None
            result.append((current_addr, hex_dump, instruction.render(immediate)))

            current_addr += instruction.length

        except IndexError:
            # マップされていないアドレス
            result.append((current_addr, "??", "ERR"))
            current_addr += 1

    return result
