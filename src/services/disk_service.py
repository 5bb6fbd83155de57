import logging
import os
from dataclasses import dataclass
from typing import List

from src.services.exceptions import ProvisioningError
from src.utils.powershell import PowerShellError, PowerShellRunner, as_list, quote

logger = logging.getLogger(__name__)

# 데이터베이스 파일이 들어가지 않는 파티션 유형
NON_DATA_PARTITION_TYPES = {"Reserved", "System", "Recovery", "Unknown"}

# ConvertTo-Json 결과가 예상한 형태가 아닐 때 발생하는 오류들
MALFORMED_PAYLOAD_ERRORS = (KeyError, IndexError, TypeError, ValueError)


@dataclass
class DiskInfo:
    number: int
    operational_status: str
    partition_style: str

    @property
    def is_offline(self) -> bool:
        return self.operational_status.lower() == "offline"

    @property
    def is_initialized(self) -> bool:
        return self.partition_style.upper() not in ("RAW", "")


@dataclass
class PartitionInfo:
    number: int
    type: str
    size: int


@dataclass
class MountedDisk:
    clone_location: str
    disk_number: int
    partition_number: int
    access_path: str


def _disk_from_json(payload) -> DiskInfo:
    return DiskInfo(
        number=int(payload["Number"]),
        operational_status=str(payload.get("OperationalStatus") or ""),
        partition_style=str(payload.get("PartitionStyle") or ""),
    )


class DiskService:
    """
    Windows 스토리지 cmdlet으로 차등(differencing) 디스크를 준비합니다.

    클론 디스크는 이미지를 부모로 하여 생성되고, 드라이브 문자 없이 마운트되며,
    오프라인 상태로 올라오면 초기화된 뒤 액세스 경로 디렉터리를 통해 노출됩니다.
    """

    def __init__(self, runner: PowerShellRunner, partition_style: str = "GPT"):
        self.runner = runner
        self.partition_style = partition_style.upper()

    def path_exists(self, path: str) -> bool:
        return os.path.exists(path)

    def create_differencing_disk(self, parent_location: str, clone_location: str):
        """
        parent_location의 이미지를 부모로 하는 차등 디스크를 생성합니다.

        Raises:
            ProvisioningError: 부모 이미지에 접근할 수 없거나, 클론 파일이 이미 있거나,
                디스크 생성에 실패했을 때.
        """
        if not self.path_exists(parent_location):
            raise ProvisioningError("create", f"Parent image '{parent_location}' is not reachable.")
        if self.path_exists(clone_location):
            raise ProvisioningError("create", f"Clone disk '{clone_location}' already exists.")

        try:
            self.runner.run(
                f"New-VHD -ParentPath {quote(parent_location)} -Path {quote(clone_location)} -Differencing | Out-Null"
            )
        except PowerShellError as e:
            raise ProvisioningError("create", f"Failed to create differencing disk '{clone_location}': {e}") from e
        logger.info("Created differencing disk '%s' from '%s'", clone_location, parent_location)

    def mount_disk(self, clone_location: str) -> DiskInfo:
        try:
            payload = self.runner.run_json(
                f"Mount-VHD -Path {quote(clone_location)} -NoDriveLetter -Passthru | Get-Disk"
                " | Select-Object Number, OperationalStatus, PartitionStyle"
            )
            disks = as_list(payload)
            if not disks:
                raise ProvisioningError("mount", f"Mounting '{clone_location}' returned no disk.")
            disk = _disk_from_json(disks[0])
        except (PowerShellError,) + MALFORMED_PAYLOAD_ERRORS as e:
            raise ProvisioningError("mount", f"Failed to mount '{clone_location}': {e}") from e
        logger.info("Mounted '%s' as disk %s (%s)", clone_location, disk.number, disk.operational_status)
        return disk

    def get_disk(self, disk_number: int) -> DiskInfo:
        payload = self.runner.run_json(
            f"Get-Disk -Number {int(disk_number)} | Select-Object Number, OperationalStatus, PartitionStyle"
        )
        return _disk_from_json(as_list(payload)[0])

    def initialize_disk(self, disk: DiskInfo) -> DiskInfo:
        """
        오프라인 디스크를 초기화하고 온라인으로 전환합니다.

        이미지에서 복제된 디스크처럼 이미 파티션 구성이 있는 경우에는
        초기화 실패를 무시합니다.
        """
        try:
            self.runner.run(f"Initialize-Disk -Number {int(disk.number)} -PartitionStyle {self.partition_style}")
        except PowerShellError as e:
            try:
                current = self.get_disk(disk.number)
            except (PowerShellError,) + MALFORMED_PAYLOAD_ERRORS:
                raise ProvisioningError("initialize", f"Failed to initialize disk {disk.number}: {e}") from e
            if not current.is_initialized:
                raise ProvisioningError("initialize", f"Failed to initialize disk {disk.number}: {e}") from e
            logger.debug("Disk %s already initialized (%s)", disk.number, current.partition_style)

        try:
            self.runner.run(f"Set-Disk -Number {int(disk.number)} -IsOffline $false")
            return self.get_disk(disk.number)
        except (PowerShellError,) + MALFORMED_PAYLOAD_ERRORS as e:
            raise ProvisioningError("initialize", f"Failed to bring disk {disk.number} online: {e}") from e

    def list_partitions(self, disk_number: int) -> List[PartitionInfo]:
        try:
            payload = self.runner.run_json(
                f"Get-Partition -DiskNumber {int(disk_number)} | Select-Object PartitionNumber, Type, Size"
            )
            return [
                PartitionInfo(
                    number=int(p["PartitionNumber"]),
                    type=str(p.get("Type") or ""),
                    size=int(p.get("Size") or 0),
                )
                for p in as_list(payload)
            ]
        except PowerShellError as e:
            raise ProvisioningError("partition", f"Failed to list partitions of disk {disk_number}: {e}") from e
        except MALFORMED_PAYLOAD_ERRORS as e:
            raise ProvisioningError(
                "partition", f"Unexpected partition data for disk {disk_number}: {type(e).__name__}: {e}"
            ) from e

    def select_data_partition(self, partitions: List[PartitionInfo]) -> PartitionInfo:
        candidates = [p for p in partitions if p.type not in NON_DATA_PARTITION_TYPES]
        if not candidates:
            raise ProvisioningError("partition", "No data partition found on the mounted disk.")
        return max(candidates, key=lambda p: p.size)

    def add_access_path(self, disk_number: int, partition_number: int, access_path: str):
        try:
            os.makedirs(access_path, exist_ok=True)
        except OSError as e:
            raise ProvisioningError("bind", f"Failed to create access path '{access_path}': {e}") from e

        try:
            self.runner.run(
                f"Add-PartitionAccessPath -DiskNumber {int(disk_number)} -PartitionNumber {int(partition_number)}"
                f" -AccessPath {quote(access_path)}"
            )
        except PowerShellError as e:
            raise ProvisioningError("bind", f"Failed to bind partition {partition_number} to '{access_path}': {e}") from e
        logger.info("Disk %s partition %s available at '%s'", disk_number, partition_number, access_path)

    def provision(self, parent_location: str, clone_location: str, access_path: str) -> MountedDisk:
        """
        클론 디스크를 생성하고 마운트한 뒤 액세스 경로로 노출합니다.

        Args:
            parent_location: 읽기 전용 부모 이미지 경로.
            clone_location: 생성할 차등 디스크 경로.
            access_path: 데이터 파티션을 노출할 디렉터리.

        Returns:
            마운트된 디스크와 액세스 경로에 연결된 파티션 정보.

        Raises:
            ProvisioningError: 하위 단계 중 하나가 실패했을 때. step 속성에 실패한 단계가 담깁니다.
        """
        self.create_differencing_disk(parent_location, clone_location)
        disk = self.mount_disk(clone_location)
        if disk.is_offline:
            disk = self.initialize_disk(disk)
        partition = self.select_data_partition(self.list_partitions(disk.number))
        self.add_access_path(disk.number, partition.number, access_path)
        return MountedDisk(
            clone_location=clone_location,
            disk_number=disk.number,
            partition_number=partition.number,
            access_path=access_path,
        )
