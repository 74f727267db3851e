"""
Calculators for block, file and backup storage.
"""
from typing import Dict

from cfn_cost.calculators.base import (
    ResourceProperties,
    ResourceCostCalculator,
    build_resource_cost,
    detail,
)
from cfn_cost.domain.cost_models import ResourceCost
from cfn_cost.pricing.catalog import PricingTable


# gp3 includes this much performance in the storage price
GP3_BASELINE_IOPS = 3000
GP3_BASELINE_THROUGHPUT = 125  # MBps

FSX_FALLBACK_PRICES = {"windows": 0.23, "lustre": 0.14, "ontap": 0.25, "openzfs": 0.09}


def calculate_ebs_volume(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    volume_type = props.string("VolumeType", "gp3").lower()
    size = props.number("Size", 100)
    iops = props.number("Iops", GP3_BASELINE_IOPS)
    throughput = props.number("Throughput", GP3_BASELINE_THROUGHPUT)

    storage_price = pricing.get("ebs", "volumes", volume_type, default=0.08)
    details = [detail(f"EBS {volume_type.upper()} Storage", size, storage_price, "GB/month")]

    if volume_type in ("io1", "io2"):
        iops_price = pricing.get("ebs", "iops", volume_type, default=0.065)
        details.append(detail("Provisioned IOPS", iops, iops_price, "IOPS/month"))

    if volume_type == "gp3":
        if iops > GP3_BASELINE_IOPS:
            iops_price = pricing.get("ebs", "iops", "gp3", default=0.005)
            details.append(detail(
                f"Additional IOPS (above {GP3_BASELINE_IOPS})",
                iops - GP3_BASELINE_IOPS, iops_price, "IOPS/month",
            ))
        if throughput > GP3_BASELINE_THROUGHPUT:
            throughput_price = pricing.get("ebs", "throughput", "gp3", default=0.04)
            details.append(detail(
                f"Additional Throughput (above {GP3_BASELINE_THROUGHPUT} MBps)",
                throughput - GP3_BASELINE_THROUGHPUT, throughput_price, "MBps/month",
            ))

    return build_resource_cost(resource_id, props.resource_type, details, confidence="high", unit="volume")


def calculate_ebs_snapshot(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    size = props.assumption("storage_gb")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"EBS Snapshot Storage (est. {size}GB)", size,
                pricing.get("ebs", "snapshots", default=0.05), "GB/month")],
        confidence="low",
        unit="snapshot",
    )


def calculate_efs_file_system(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    size = props.assumption("storage_gb")
    details = [
        detail(f"EFS Standard Storage (est. {size}GB)", size,
               pricing.get("efs", "standard", default=0.30), "GB/month"),
    ]

    if props.string("ThroughputMode", "bursting") == "provisioned":
        provisioned = props.number("ProvisionedThroughputInMibps", 0)
        if provisioned > 0:
            details.append(detail(
                f"Provisioned Throughput ({provisioned} MiBps)", provisioned,
                pricing.get("efs", "provisioned_throughput", default=6.00), "MiBps/month",
            ))

    return build_resource_cost(resource_id, props.resource_type, details, confidence="low", unit="file system")


def calculate_fsx_file_system(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    file_system_type = props.string("FileSystemType", "WINDOWS")
    capacity = props.number("StorageCapacity", 32)
    family = file_system_type.lower()
    price = pricing.get("fsx", family, default=FSX_FALLBACK_PRICES.get(family, FSX_FALLBACK_PRICES["windows"]))
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"FSx {file_system_type} Storage ({capacity}GB)", capacity, price, "GB/month")],
        confidence="high",
        unit="file system",
    )


def calculate_backup_vault(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    size = props.assumption("storage_gb")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"AWS Backup Storage (est. {size}GB)", size,
                pricing.get("backup", "storage", default=0.05), "GB/month")],
        confidence="low",
        unit="vault",
    )


CALCULATORS: Dict[str, ResourceCostCalculator] = {
    "AWS::EC2::Volume": calculate_ebs_volume,
    "AWS::EC2::Snapshot": calculate_ebs_snapshot,
    "AWS::EFS::FileSystem": calculate_efs_file_system,
    "AWS::FSx::FileSystem": calculate_fsx_file_system,
    "AWS::Backup::BackupVault": calculate_backup_vault,
}
