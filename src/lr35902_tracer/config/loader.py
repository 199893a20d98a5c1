import yaml
from typing import Dict, Any
from .models import SystemConfig, MemoryRegion, CpuInitialState

# @intent:responsibility YAML形式のシステム構成を読み込み、SystemConfigに変換します。
class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        arch = data.get("architecture", "LR35902")

        memory_map = []
        for region_data in data.get("memory_map", []):
            memory_map.append(MemoryRegion(
                start=self._parse_int(region_data.get("start")),
                end=self._parse_int(region_data.get("end")),
                type=region_data.get("type", "RAM"),
                label=region_data.get("label", ""),
            ))

        initial_state_data = data.get("initial_state", {})
        initial_state = CpuInitialState(
            pc=self._parse_int(initial_state_data.get("pc", 0)),
            sp=self._parse_int(initial_state_data.get("sp", 0)),
            registers={
                name: self._parse_int(value)
                for name, value in initial_state_data.get("registers", {}).items()
            },
            flags={name: self._parse_bool(value) for name, value in initial_state_data.get("flags", {}).items()},
        )

        symbols = {name: self._parse_int(addr) for name, addr in data.get("symbols", {}).items()}

        return SystemConfig(
            architecture=arch,
            memory_map=memory_map,
            initial_state=initial_state,
            symbols=symbols,
        )

    # @intent:rationale YAMLの0x表記は整数として読まれるが、引用符付きの場合は文字列のまま届く。
    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            if value.startswith("$"):
                return int(value[1:], 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")

    # @intent:rationale 引用符付きの "false" を真と誤読しないよう、YAMLの真偽値と0/1以外は受け付けない。
    def _parse_bool(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise ValueError(f"Invalid boolean format: {value}")
