"""Dell OpenManage (omreport) hardware collectors"""
import re
from abc import abstractmethod
from typing import List, Optional, Tuple
from .base import BaseCollector


HEADER_FIELDS = ("Index", "ID", "SEVERITY")
_NON_PRINTABLE = re.compile(r"[^\x20-\x7e]")


def clean(field: str) -> str:
    """Strip whitespace and non-printable characters from an ssv field"""
    return _NON_PRINTABLE.sub("", field).strip()


def label_value(field: str) -> str:
    """Identifier usable as a label value and as a Zabbix key component"""
    return re.sub(r"[\s:]+", "_", field.strip())


def severity(status: str) -> str:
    """0 when omreport reports the component as healthy, 1 otherwise"""
    if status in ("Ok", "Non-Critical"):
        return "0"
    return "1"


def reading(field: str, unit: str) -> Optional[str]:
    """Number from a reading such as '21.0 C' when it carries the expected unit"""
    parts = field.split()
    if len(parts) == 2 and parts[1] == unit:
        return parts[0]
    return None


def is_header(fields: List[str]) -> bool:
    return not fields or fields[0] in HEADER_FIELDS


class OMReportCollector(BaseCollector):
    """Runs `omreport <command> -fmt ssv` and feeds each line to parse_fields()"""

    command: Tuple[str, ...] = ()

    def omreport(self, *args: str) -> List[List[str]]:
        """Run omreport and split its semicolon-separated output"""
        binary = getattr(self.config, 'omreport_path', 'omreport')
        lines = self.run_command(binary, *args, "-fmt", "ssv")
        return [[clean(f) for f in line.split(";")] for line in lines]

    def collect(self) -> None:
        for fields in self.omreport(*self.command):
            self.parse_fields(fields)

    @abstractmethod
    def parse_fields(self, fields: List[str]) -> None:
        pass


class ChassisCollector(OMReportCollector):
    command = ("chassis",)

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "chassis", "Overall chassis component health")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) != 2 or is_header(fields):
            return
        self.add("chassis_status", severity(fields[0]), {"component": label_value(fields[1])},
                 "Overall status of chassis components (0 = ok)")


class SystemCollector(OMReportCollector):
    command = ("system",)

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "system", "Overall system component health")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) != 2 or is_header(fields):
            return
        self.add("system_status", severity(fields[0]), {"component": label_value(fields[1])},
                 "Overall status of system components (0 = ok)")


class FansCollector(OMReportCollector):
    command = ("chassis", "fans")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "fans", "Chassis fan status and speed")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) != 8 or is_header(fields):
            return
        labels = {"fan": label_value(fields[2])}
        self.add("chassis_fan_status", severity(fields[1]), labels, "Overall status of system fans (0 = ok)")
        rpm = reading(fields[3], "RPM")
        if rpm is not None:
            self.add("chassis_fan_reading", rpm, labels, "Fan speed in RPM")


class MemoryCollector(OMReportCollector):
    command = ("chassis", "memory")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "memory", "Memory module status")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) != 5 or not fields[0].isdigit():
            return
        self.add("memory_status", severity(fields[1]), {"memory": label_value(fields[2])},
                 "System RAM DIMM status (0 = ok)")


class ProcessorsCollector(OMReportCollector):
    command = ("chassis", "processors")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "processors", "Processor status")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) != 8 or not fields[0].isdigit():
            return
        self.add("cpu_status", severity(fields[1]), {"cpu": label_value(fields[2])},
                 "Overall status of CPUs (0 = ok)")


class PowerSupplyCollector(OMReportCollector):
    command = ("chassis", "pwrsupplies")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "ps", "Power supply status")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) < 3 or is_header(fields):
            return
        self.add("ps_status", severity(fields[1]), {"id": label_value(fields[0])},
                 "Overall status of power supplies (0 = ok)")


class PowerMonitoringCollector(OMReportCollector):
    command = ("chassis", "pwrmonitoring")
    board_probes = ("System Board Pwr Consumption", "System Board System Level")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "ps_amps_sysboard_pwr", "Power supply current and system board power")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) == 2 and "Current" in fields[0]:
            supply = fields[0].split("Current")[0]
            value = fields[1].split()
            if not value:
                return
            self.add("chassis_current_reading", value[0], {"pwrsupply": label_value(supply)},
                     "Power supply current in amps")
        elif len(fields) == 6 and fields[2] in self.board_probes:
            current, warn, fail = (f.split() for f in fields[3:6])
            if len(current) < 2 or len(warn) < 2 or len(fail) < 2:
                return
            self.add("chassis_power_reading", current[0], {}, "System board power usage in watts")
            self.add("chassis_power_warn_level", warn[0], {}, "System board power warning level in watts")
            self.add("chassis_power_fail_level", fail[0], {}, "System board power failure level in watts")


class StorageBatteryCollector(OMReportCollector):
    command = ("storage", "battery")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "storage_battery", "Storage controller battery status")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) < 3 or is_header(fields):
            return
        self.add("storage_battery_status", severity(fields[1]), {"id": label_value(fields[0])},
                 "Status of storage controller backup batteries (0 = ok)")


class StorageControllerCollector(OMReportCollector):
    command = ("storage", "controller")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "storage_controller", "Storage controller and physical disk status")

    def collect(self) -> None:
        controllers = []
        for fields in self.omreport(*self.command):
            if len(fields) < 3 or is_header(fields):
                continue
            controllers.append(fields[0])
            self.parse_fields(fields)

        for controller in controllers:
            for fields in self.omreport("storage", "pdisk", f"controller={controller}"):
                self.parse_pdisk(controller, fields)

    def parse_fields(self, fields: List[str]) -> None:
        self.add("storage_controller_status", severity(fields[1]), {"id": label_value(fields[0])},
                 "Overall status of storage controllers (0 = ok)")

    def parse_pdisk(self, controller: str, fields: List[str]) -> None:
        if len(fields) < 3 or is_header(fields):
            return
        labels = {"controller": label_value(controller), "disk": label_value(fields[0])}
        self.add("storage_pdisk_status", severity(fields[1]), labels,
                 "Overall status of physical disks (0 = ok)")


class StorageEnclosureCollector(OMReportCollector):
    command = ("storage", "enclosure")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "storage_enclosure", "Storage enclosure status")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) < 3 or is_header(fields):
            return
        self.add("storage_enclosure_status", severity(fields[1]), {"enclosure": label_value(fields[0])},
                 "Overall status of storage enclosures (0 = ok)")


class StorageVdiskCollector(OMReportCollector):
    command = ("storage", "vdisk")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "storage_vdisk", "Virtual disk status")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) < 3 or is_header(fields):
            return
        self.add("storage_vdisk_status", severity(fields[1]), {"vdisk": label_value(fields[0])},
                 "Overall status of virtual disks and RAID volumes (0 = ok)")


class TempsCollector(OMReportCollector):
    command = ("chassis", "temps")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "temps", "Temperature probe status and readings")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) != 8 or is_header(fields):
            return
        labels = {"component": label_value(fields[2])}
        self.add("chassis_temps", severity(fields[1]), labels, "Overall temperature probe status (0 = ok)")
        celsius = reading(fields[3], "C")
        if celsius is not None:
            self.add("chassis_temps_reading", celsius, labels, "Temperature probe reading in degrees Celsius")


class VoltsCollector(OMReportCollector):
    command = ("chassis", "volts")

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "volts", "Voltage probe status and readings")

    def parse_fields(self, fields: List[str]) -> None:
        if len(fields) != 8 or is_header(fields):
            return
        labels = {"component": label_value(fields[2])}
        self.add("chassis_volts_status", severity(fields[1]), labels, "Overall voltage probe status (0 = ok)")
        volts = reading(fields[3], "V")
        if volts is not None:
            self.add("chassis_volts_reading", volts, labels, "Voltage probe reading in volts")
