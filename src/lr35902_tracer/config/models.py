from dataclasses import dataclass, field
from typing import Dict, List

@dataclass
class MemoryRegion:
    start: int
    end: int
    type: str  # "RAM", "ROM"
    label: str = ""

@dataclass
class CpuInitialState:
    pc: int = 0x0000
    sp: int = 0x0000
    registers: Dict[str, int] = field(default_factory=dict) # 8ビットレジスタまたはレジスタペア名
    flags: Dict[str, bool] = field(default_factory=dict)    # "z", "n", "h", "c"

@dataclass
class SystemConfig:
    architecture: str = "LR35902"
    memory_map: List[MemoryRegion] = field(default_factory=list)
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
    symbols: Dict[str, int] = field(default_factory=dict)
