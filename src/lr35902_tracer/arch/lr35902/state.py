# lr35902_tracer/arch/lr35902/state.py
"""
LR35902 CPU固有の状態定義（レジスタファイル）。

このモジュールは、LR35902 CPUのレジスタ、フラグ、およびレジスタペアを保持するデータ構造を定義します。
Fレジスタは独立した1バイトではなく、4つのフラグ（Z, N, H, C）をパックしたビューです。
"""
from dataclasses import dataclass

from lr35902_tracer.core.state import CpuState

# LR35902フラグビットマスク
# @intent:constant Fレジスタ内の各フラグビットの位置を定義します。下位4ビットは常に0です。
Z_FLAG = 0b10000000  # Zero (ゼロ)
N_FLAG = 0b01000000  # Subtraction (減算)
H_FLAG = 0b00100000  # Half Carry (ハーフキャリー)
C_FLAG = 0b00010000  # Carry (キャリー)
F_MASK = 0b11110000

PAIR_NAMES = ("af", "bc", "de", "hl")


# @intent:responsibility LR35902 CPUの全てのレジスタとフラグの状態を保持します。
@dataclass
class Lr35902CpuState(CpuState):
    """
    LR35902 CPUのレジスタ状態を保持するデータクラス。
    CpuStateを拡張し、8ビットレジスタと4つのフラグを含みます。
    """
    a: int = 0x00
    b: int = 0x00
    c: int = 0x00
    d: int = 0x00
    e: int = 0x00
    h: int = 0x00
    l: int = 0x00

    # @intent:rationale フラグはブール値として保持し、Fレジスタはそこから都度パックします。
    #                   格納場所が1つしかないため、フラグとFの値が食い違うことはありません。
    flag_z: bool = False
    flag_n: bool = False
    flag_h: bool = False
    flag_c: bool = False

    @property
    def f(self) -> int:
        return ((Z_FLAG if self.flag_z else 0)
                | (N_FLAG if self.flag_n else 0)
                | (H_FLAG if self.flag_h else 0)
                | (C_FLAG if self.flag_c else 0))

    @f.setter
    def f(self, value: int) -> None:
        value &= F_MASK
        self.flag_z = (value & Z_FLAG) != 0
        self.flag_n = (value & N_FLAG) != 0
        self.flag_h = (value & H_FLAG) != 0
        self.flag_c = (value & C_FLAG) != 0

    # 16-bit register pairs
    @property
    def af(self) -> int:
        return (self.a << 8) | self.f

    @af.setter
    def af(self, value: int) -> None:
        self.a = (value >> 8) & 0xFF
        self.f = value & 0xFF

    @property
    def bc(self) -> int:
        return (self.b << 8) | self.c

    @bc.setter
    def bc(self, value: int) -> None:
        self.b = (value >> 8) & 0xFF
        self.c = value & 0xFF

    @property
    def de(self) -> int:
        return (self.d << 8) | self.e

    @de.setter
    def de(self, value: int) -> None:
        self.d = (value >> 8) & 0xFF
        self.e = value & 0xFF

    @property
    def hl(self) -> int:
        return (self.h << 8) | self.l

    @hl.setter
    def hl(self, value: int) -> None:
        self.h = (value >> 8) & 0xFF
        self.l = value & 0xFF

    # @intent:responsibility レジスタペアを名前で読み出します（デバッガ・設定ファイル向け）。
    def read_pair(self, name: str) -> int:
        return getattr(self, self._pair_attribute(name))

    # @intent:responsibility レジスタペアを名前で書き込みます。
    def write_pair(self, name: str, value: int) -> None:
        setattr(self, self._pair_attribute(name), value & 0xFFFF)

    @staticmethod
    def _pair_attribute(name: str) -> str:
        attr = name.lower()
        if attr not in PAIR_NAMES:
            raise ValueError(f"Unknown register pair: {name}")
        return attr
