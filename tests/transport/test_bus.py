# tests/transport/test_bus.py
"""
lr35902_tracer.transport.busモジュールの単体テスト。
"""
import pytest
from lr35902_tracer.transport.bus import Bus, Device, RAM, ROM, BusAccess, BusAccessType

# @intent:test_suite 共通バスとデバイスの基本的な機能とエラーハンドリングを検証します。

class TestRAM:
    """
    RAMデバイスの単体テスト。
    """
    def test_ram_init_valid_size(self):
        ram = RAM(16)
        assert ram.get_size() == 16
        assert all(ram.read(i) == 0 for i in range(16))

    def test_ram_init_invalid_size(self):
        with pytest.raises(ValueError, match="RAM size must be a positive integer."):
            RAM(0)
        with pytest.raises(ValueError, match="RAM size must be a positive integer."):
            RAM(-1)
        with pytest.raises(ValueError, match="RAM size must be a positive integer."):
            RAM(1.5)

    def test_ram_read_write_within_bounds(self):
        ram = RAM(4)
        for i, value in enumerate([0x12, 0x34, 0x56, 0x78]):
            ram.write(i, value)
        assert [ram.read(i) for i in range(4)] == [0x12, 0x34, 0x56, 0x78]

    # @intent:test_case_oob 境界外アドレスへのアクセス時にIndexErrorが発生することを検証します。
    def test_ram_read_write_out_of_bounds(self):
        ram = RAM(4)
        with pytest.raises(IndexError, match="Address 4 out of bounds for RAM of size 4."):
            ram.read(4)
        with pytest.raises(IndexError, match="Address -1 out of bounds for RAM of size 4."):
            ram.write(-1, 0x00)

    def test_ram_write_invalid_data(self):
        ram = RAM(1)
        with pytest.raises(ValueError, match="Data 256 is not an 8-bit value."):
            ram.write(0, 0x100)
        with pytest.raises(ValueError, match="Data -1 is not an 8-bit value."):
            ram.write(0, -1)

class TestROM:
    # @intent:test_case_rom_write 通常の書き込みは無視され、load_dataでのみ内容が変わることを検証します。
    def test_rom_ignores_writes(self):
        rom = ROM(4)
        rom.write(0, 0xAA)
        assert rom.read(0) == 0x00
        rom.load_data(0, 0xAA)
        assert rom.read(0) == 0xAA

    def test_rom_write_out_of_bounds(self):
        rom = ROM(4)
        with pytest.raises(IndexError):
            rom.write(4, 0x00)

class TestBus:
    """
    Busの単体テスト。
    """
    def test_register_and_access_device(self):
        bus = Bus()
        ram1 = RAM(16)
        ram2 = RAM(16)
        bus.register_device(0x0000, 0x000F, ram1)
        bus.register_device(0x0010, 0x001F, ram2)

        bus.write_byte(0x0005, 0xAA)
        assert bus.read_byte(0x0005) == 0xAA
        assert ram1.read(5) == 0xAA

        bus.write_byte(0x001A, 0xBB)
        assert bus.read_byte(0x001A) == 0xBB
        assert ram2.read(0x0A) == 0xBB

    def test_access_unmapped_address(self):
        bus = Bus()
        bus.register_device(0x0000, 0x0FFF, RAM(0x1000))
        with pytest.raises(IndexError, match="Address 0x2000 not mapped to any device."):
            bus.read_byte(0x2000)
        with pytest.raises(IndexError):
            bus.write_byte(0x2000, 0xFF)
        with pytest.raises(IndexError):
            bus.peek(0x2000)

    @pytest.mark.parametrize("start, end", [(0x2000, 0x1000), (-1, 0x100), (0xFF00, 0x10000)])
    def test_register_device_invalid_range(self, start, end):
        with pytest.raises(ValueError):
            Bus().register_device(start, end, RAM(0x100))

    def test_register_device_size_mismatch(self):
        with pytest.raises(ValueError, match="does not match"):
            Bus().register_device(0x1000, 0x10FF, RAM(0x200))

    def test_register_non_device(self):
        with pytest.raises(TypeError):
            Bus().register_device(0x0000, 0x00FF, bytearray(0x100))

    # @intent:test_case_custom_device Deviceを継承した任意のデバイスを登録できることを検証します。
    def test_custom_device(self):
        class ConstantDevice(Device):
            def read(self, address: int) -> int:
                return 0x5A

            def write(self, address: int, data: int) -> None:
                pass

        bus = Bus()
        bus.register_device(0xFF00, 0xFFFF, ConstantDevice())
        assert bus.read_byte(0xFF42) == 0x5A

    # @intent:test_case_activity_log 読み書きが順に記録され、取得時にクリアされることを検証します。
    def test_activity_log(self):
        bus = Bus()
        bus.register_device(0x0000, 0xFFFF, RAM(0x10000))
        bus.write_byte(0x1000, 0x11)
        bus.write_byte(0x1000, 0x22)
        bus.read_byte(0x1000)
        bus.peek(0x1000)

        assert bus.get_and_clear_activity_log() == [
            BusAccess(0x1000, 0x11, BusAccessType.WRITE, previous_data=0x00),
            BusAccess(0x1000, 0x22, BusAccessType.WRITE, previous_data=0x11),
            BusAccess(0x1000, 0x22, BusAccessType.READ),
        ]
        assert bus.get_and_clear_activity_log() == []

    # @intent:test_case_rom_on_bus バス経由のROM書き込みは無視され、loadでは書き込めることを検証します。
    def test_rom_on_bus(self):
        bus = Bus()
        bus.register_device(0x0000, 0x7FFF, ROM(0x8000))
        bus.write_byte(0x0100, 0xC6)
        assert bus.peek(0x0100) == 0x00

        bus.load(0x0100, 0xC6)
        assert bus.peek(0x0100) == 0xC6

    def test_load_bytes(self):
        bus = Bus()
        bus.register_device(0x0000, 0xFFFF, RAM(0x10000))
        bus.load_bytes(0xFFFE, bytes([0x01, 0x02, 0x03]))
        assert bus.peek(0xFFFE) == 0x01
        assert bus.peek(0xFFFF) == 0x02
        assert bus.peek(0x0000) == 0x03
