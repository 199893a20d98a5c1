import logging
from typing import Tuple

from lr35902_tracer.transport.bus import Bus, Device, RAM, ROM
from lr35902_tracer.core.cpu import AbstractCpu
from lr35902_tracer.arch.lr35902.cpu import Lr35902Cpu
from lr35902_tracer.arch.lr35902.state import PAIR_NAMES
from .models import SystemConfig, CpuInitialState

logger = logging.getLogger(__name__)

FLAG_ATTRIBUTES = {"z": "flag_z", "n": "flag_n", "h": "flag_h", "c": "flag_c"}

# @intent:responsibility システム構成（Config）に基づいて、Bus、Device、CPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Tuple[AbstractCpu, Bus]:
        bus = Bus()

        for region in config.memory_map:
            bus.register_device(region.start, region.end, self._create_device(region.type, region.end - region.start + 1))
            logger.debug("Mapped %s %04X-%04X %s", region.type, region.start, region.end, region.label)

        if config.architecture.upper() in ("LR35902", "SM83", "GB"):
            cpu = Lr35902Cpu(bus)
        else:
            raise ValueError(f"Unsupported architecture: {config.architecture}")

        self.apply_initial_state(cpu, config.initial_state)
        if config.symbols:
            cpu.set_symbol_map(config.symbols)

        return cpu, bus

    def _create_device(self, device_type: str, size: int) -> Device:
        if device_type.upper() == "RAM":
            return RAM(size)
        if device_type.upper() == "ROM":
            return ROM(size)
        raise ValueError(f"Unknown device type: {device_type}")

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    def apply_initial_state(self, cpu: AbstractCpu, config_state: CpuInitialState) -> None:
        """
        CPUをリセットし、Configから指定された初期値を適用します。
        """
        cpu.reset()
        state = cpu.get_state()

        state.pc = config_state.pc & 0xFFFF
        state.sp = config_state.sp & 0xFFFF

        # ペアは対応する8ビットレジスタに分割され、AFの下位ニブルは捨てられる
        for reg_name, value in config_state.registers.items():
            name = reg_name.lower()
            if name in PAIR_NAMES:
                state.write_pair(name, value)
            elif name in ("a", "b", "c", "d", "e", "h", "l", "f"):
                setattr(state, name, value & 0xFF)
            else:
                raise ValueError(f"Unknown register: {reg_name}")

        for flag_name, value in config_state.flags.items():
            attr = FLAG_ATTRIBUTES.get(flag_name.lower())
            if attr is None:
                raise ValueError(f"Unknown flag: {flag_name}")
            setattr(state, attr, value)
