"""ROM cartridge loading."""

from chex import dataclass

from chipvm.constants import MAX_ROM_SIZE


class CartridgeError(OSError):
    """The ROM file could not be read."""


@dataclass(frozen=True, mappable_dataclass=False)
class Cartridge:
    """Raw program bytes, at most one program region long."""
    rom: bytes
    rom_size: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "Cartridge":
        rom = bytes(data[:MAX_ROM_SIZE])
        return cls(rom=rom, rom_size=len(rom))

    @classmethod
    def from_file(cls, filename: str) -> "Cartridge":
        """Read up to MAX_ROM_SIZE bytes from ``filename``."""
        try:
            with open(filename, "rb") as f:
                data = f.read(MAX_ROM_SIZE)
        except OSError as e:
            raise CartridgeError(f"cannot read ROM '{filename}': {e}") from e
        return cls.from_bytes(data)

    @property
    def empty(self) -> bool:
        return self.rom_size == 0
