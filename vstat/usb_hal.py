"""Memory access to MacroSilicon capture chips over USB HID using pyusb (libusb).

The chip answers vendor commands carried in 8-byte HID feature reports.
Reading XDATA RAM is one transaction per byte:

    SET_REPORT  [0xB5, addr_hi, addr_lo, 0, 0, 0, 0, 0]
    GET_REPORT  [0xB5, addr_hi, addr_lo, value, ...]
"""

from __future__ import annotations

import logging
from typing import Optional

import usb.core
import usb.util

from .interfaces import MemoryAccessInterface, MemoryRegion

logger = logging.getLogger(__name__)

# MS2109 defaults
DEFAULT_VID = 0x534D
DEFAULT_PID = 0x2109

REPORT_SIZE = 8
VALUE_OFFSET = 3

# Region name -> read command
READ_COMMANDS = {
    "RAM": 0xB5,
}

_HID_SET_REPORT = 0x09
_HID_GET_REPORT = 0x01
_FEATURE_REPORT = 0x0300  # report type 3 (feature), report id 0
_REQ_OUT = 0x21  # host-to-device, class, interface
_REQ_IN = 0xA1  # device-to-host, class, interface


class UsbHidMemoryAccess(MemoryAccessInterface):
    """
    Reads chip memory through HID feature reports.

    The device is opened on first use. Any USB error drops the handle and
    the read reports b'' so the caller can retry; the next read reopens.

    Args:
        vid: USB Vendor ID of the capture chip.
        pid: USB Product ID of the capture chip.
        interface: HID interface number carrying the vendor reports.
        timeout_ms: Timeout for each control transfer.
    """

    def __init__(
        self,
        vid: int = DEFAULT_VID,
        pid: int = DEFAULT_PID,
        interface: int = 0,
        timeout_ms: int = 1000,
    ):
        self._vid = vid
        self._pid = pid
        self._interface = interface
        self._timeout_ms = timeout_ms
        self._dev: Optional[usb.core.Device] = None
        self._detached = False

    def __enter__(self) -> UsbHidMemoryAccess:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def read(self, region: MemoryRegion) -> bytes:
        command = READ_COMMANDS.get(region.region)
        if command is None:
            logger.error("Region %r is not readable over HID", region.region)
            return b""

        dev = self._open()
        if dev is None:
            return b""

        out = bytearray()
        try:
            for addr in range(region.address, region.address + region.length):
                out.append(self._read_byte(dev, command, addr))
        except usb.core.USBError as e:
            logger.debug("Read of %s failed at byte %d: %s", region, len(out), e)
            self.close()
            return b""
        return bytes(out)

    def close(self) -> None:
        if self._dev is None:
            return
        try:
            usb.util.dispose_resources(self._dev)
            if self._detached:
                self._dev.attach_kernel_driver(self._interface)
        except usb.core.USBError as e:
            logger.debug("USB close: %s", e)
        self._dev = None
        self._detached = False

    def _open(self) -> Optional[usb.core.Device]:
        if self._dev is not None:
            return self._dev

        try:
            dev = usb.core.find(idVendor=self._vid, idProduct=self._pid)
        except usb.core.NoBackendError as e:
            logger.error("No libusb backend available: %s", e)
            return None
        if dev is None:
            logger.debug("USB device %04x:%04x not found", self._vid, self._pid)
            return None

        try:
            if dev.is_kernel_driver_active(self._interface):
                dev.detach_kernel_driver(self._interface)
                self._detached = True
        except (NotImplementedError, usb.core.USBError) as e:
            # Not supported on every platform; the transfers may still work
            logger.debug("Could not detach kernel driver: %s", e)

        self._dev = dev
        return dev

    def _read_byte(self, dev: usb.core.Device, command: int, addr: int) -> int:
        report = bytes([command, (addr >> 8) & 0xFF, addr & 0xFF]) + b"\x00" * (REPORT_SIZE - 3)
        dev.ctrl_transfer(
            _REQ_OUT, _HID_SET_REPORT, _FEATURE_REPORT, self._interface,
            report, timeout=self._timeout_ms,
        )
        resp = dev.ctrl_transfer(
            _REQ_IN, _HID_GET_REPORT, _FEATURE_REPORT, self._interface,
            REPORT_SIZE, timeout=self._timeout_ms,
        )
        if len(resp) <= VALUE_OFFSET or resp[0] != command:
            raise usb.core.USBError(f"unexpected report for 0x{addr:04x}: {bytes(resp).hex()}")
        return resp[VALUE_OFFSET]
