"""Cartridge memory mappers: ROM and external RAM banking."""

from __future__ import annotations

import warnings
from typing import Callable, Optional, Sequence

__all__ = [
    "ROMBANK_SIZE",
    "RAMBANK_SIZE",
    "MAX_EXTRAM_SIZE",
    "UnsupportedCartridgeError",
    "MemoryMap",
    "Bank",
    "Mapper",
    "gbs_mapper",
    "gbr_mapper",
    "gb_mapper",
]

ROMBANK_SIZE = 0x4000
RAMBANK_SIZE = 0x2000
MAX_EXTRAM_SIZE = 0x8000

_PAGES = 0x100

Getter = Callable[[int], int]
Putter = Callable[[int, int], None]

_RAM_SIZES = {
    0x01: 0x00800,  # 2 KiB
    0x02: 0x02000,  # 8 KiB
    0x03: 0x08000,  # 32 KiB
}

_MBC1_CARTS = {0x00, 0x01, 0x02, 0x03, 0x08, 0x09}
_MBC3_CARTS = {0x11, 0x12, 0x13}


class UnsupportedCartridgeError(ValueError):
    """Raised for a cartridge type no mapper is implemented for."""


class MemoryMap:
    """A 64 KiB address space split into 256-byte pages with handlers.

    Reads from unmapped pages return 0xff; writes to them are ignored.
    """

    def __init__(self) -> None:
        self._pages: list[Optional[tuple[Putter, Getter]]] = [None] * _PAGES

    def add(self, first_page: int, last_page: int, put: Putter, get: Getter) -> None:
        """Route pages ``first_page`` to ``last_page`` inclusive to the handlers."""
        if not 0 <= first_page <= last_page < _PAGES:
            raise ValueError(f"invalid page range {first_page:#x}-{last_page:#x}")
        for page in range(first_page, last_page + 1):
            self._pages[page] = (put, get)

    def read(self, addr: int) -> int:
        """Return the byte at ``addr``."""
        addr &= 0xFFFF
        entry = self._pages[addr >> 8]
        if entry is None:
            return 0xFF
        return entry[1](addr)

    def write(self, addr: int, value: int) -> None:
        """Write ``value`` to ``addr``."""
        addr &= 0xFFFF
        entry = self._pages[addr >> 8]
        if entry is not None:
            entry[0](addr, value & 0xFF)


class Bank:
    """A window of ``banksize`` bytes onto ROM or RAM."""

    def __init__(self, banksize: int, enabled: bool = True) -> None:
        self.banksize = banksize
        self.mask = banksize - 1
        self.enabled = enabled
        self.size = 0
        self._data: Optional[Sequence[int]] = None
        self._offset = 0

    def _map(self, data: Sequence[int], bank: int, size: Optional[int] = None) -> None:
        limit = len(data) if size is None else size
        offset = bank * self.banksize
        if offset >= limit:
            warnings.warn(
                f"Bank {bank} out of range (0-{limit // self.banksize})!",
                RuntimeWarning,
                stacklevel=3,
            )
            self._data = None
            self._offset = 0
            self.size = 0
            return
        self._data = data
        self._offset = offset
        self.size = limit - offset

    def get(self, addr: int) -> int:
        """Return the byte at ``addr`` within the bank, 0xff if unavailable."""
        maddr = addr & self.mask
        if not self.enabled or self._data is None or maddr >= self.size:
            return 0xFF
        return self._data[self._offset + maddr]

    def put(self, addr: int, value: int) -> None:
        """Store ``value`` at ``addr`` within the bank if it is available."""
        maddr = addr & self.mask
        if not self.enabled or self._data is None or maddr >= self.size:
            return
        self._data[self._offset + maddr] = value & 0xFF  # type: ignore[index]


class Mapper:
    """ROM, external RAM and the banks mapping them into the address space."""

    def __init__(self, rom: bytes, ram_size: int) -> None:
        if ram_size > MAX_EXTRAM_SIZE:
            raise ValueError(f"RAM size {ram_size:#x} exceeds {MAX_EXTRAM_SIZE:#x}")
        self.rom = bytes(rom)
        self.ram_size = ram_size
        self.ram = bytearray(MAX_EXTRAM_SIZE)
        self.rom_lower = Bank(ROMBANK_SIZE)
        self.rom_upper = Bank(ROMBANK_SIZE)
        self.extram = Bank(RAMBANK_SIZE, enabled=False)
        self.regs = [0] * 4

    def _map_rom(self, bank: Bank, number: int) -> None:
        bank._map(self.rom, number)

    def _map_ram(self, bank: Bank, number: int) -> None:
        bank._map(self.ram, number, self.ram_size)

    def _gbs_rom_put(self, addr: int, value: int) -> None:
        if 0x2000 <= addr <= 0x3FFF:
            self._map_rom(self.rom_upper, value + (value == 0))
        else:
            warnings.warn(
                f"rom write of {value:02x} to {addr:04x} ignored",
                RuntimeWarning,
                stacklevel=3,
            )

    def _store_reg(self, addr: int, value: int) -> None:
        self.regs[(addr >> 13) & 3] = value
        self.extram.enabled = self.regs[0] == 0x0A

    def _mbc1_rom_put(self, addr: int, value: int) -> None:
        self._store_reg(addr, value)
        rombank = self.regs[1] & 0x1F
        rombank += rombank == 0
        rambank = self.regs[2] & 0x03

        if self.regs[3] == 1:
            if self.ram_size > RAMBANK_SIZE:
                # RAM banking mode
                self._map_rom(self.rom_lower, 0)
                self._map_rom(self.rom_upper, rombank)
                self._map_ram(self.extram, rambank)
            else:
                # Advanced ROM banking mode
                rombank |= rambank << 5
                self._map_rom(self.rom_lower, rambank << 5)
                self._map_rom(self.rom_upper, rombank)
                self._map_ram(self.extram, 0)
        else:
            # Simple ROM banking mode
            rombank |= rambank << 5
            self._map_rom(self.rom_lower, 0)
            self._map_rom(self.rom_upper, rombank)
            self._map_ram(self.extram, 0)

    def _mbc3_rom_put(self, addr: int, value: int) -> None:
        # RTC registers are not supported.
        self._store_reg(addr, value)
        rombank = self.regs[1] & 0x7F
        rombank += rombank == 0
        rambank = self.regs[2] & 0x03
        self._map_rom(self.rom_lower, 0)
        self._map_rom(self.rom_upper, rombank)
        self._map_ram(self.extram, rambank)


def _attach(bus: MemoryMap, mapper: Mapper, rom_put: Putter, with_ram: bool = True) -> None:
    bus.add(0x00, 0x3F, rom_put, mapper.rom_lower.get)
    bus.add(0x40, 0x7F, rom_put, mapper.rom_upper.get)
    if with_ram:
        bus.add(0xA0, 0xBF, mapper.extram.put, mapper.extram.get)


def gbs_mapper(bus: MemoryMap, rom: bytes) -> Mapper:
    """Map a GBS image: writes to 0x2000-0x3fff select the upper ROM bank."""
    mapper = Mapper(rom, RAMBANK_SIZE)
    mapper.extram.enabled = True
    mapper._map_rom(mapper.rom_lower, 0)
    mapper._map_rom(mapper.rom_upper, 1)
    mapper._map_ram(mapper.extram, 0)
    _attach(bus, mapper, mapper._gbs_rom_put)
    return mapper


def gbr_mapper(bus: MemoryMap, rom: bytes, bank_lower: int, bank_upper: int) -> Mapper:
    """Map a GBR image with the given initial lower and upper ROM banks."""
    mapper = Mapper(rom, RAMBANK_SIZE)
    mapper._map_rom(mapper.rom_lower, bank_lower)
    mapper._map_rom(mapper.rom_upper, bank_upper)
    mapper._map_ram(mapper.extram, 0)
    _attach(bus, mapper, mapper._gbs_rom_put)
    return mapper


def gb_mapper(bus: MemoryMap, rom: bytes, cart_type: int, rom_type: int, ram_type: int) -> Mapper:
    """Map a cartridge image according to its header's type bytes."""
    if cart_type in _MBC1_CARTS:
        mapper_put_name = "_mbc1_rom_put"
    elif cart_type in _MBC3_CARTS:
        mapper_put_name = "_mbc3_rom_put"
    else:
        raise UnsupportedCartridgeError(f"unsupported cartridge type {cart_type:#04x}")

    ram_size = _RAM_SIZES.get(ram_type, 0)
    mapper = Mapper(rom, ram_size)
    mapper._map_rom(mapper.rom_lower, 0)
    mapper._map_rom(mapper.rom_upper, 1)
    rom_put = getattr(mapper, mapper_put_name)
    _attach(bus, mapper, rom_put, with_ram=False)

    if ram_size > 0:
        mapper._map_ram(mapper.extram, 0)
        bus.add(0xA0, 0xBF, mapper.extram.put, mapper.extram.get)
    return mapper